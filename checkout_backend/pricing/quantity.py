"""
Mise à l'échelle par la quantité (items non récurrents uniquement).
"""
import logging
from dataclasses import replace
from decimal import Decimal

from .amounts import round2
from .enums import PricingMode
from .models import PricedItem

logger = logging.getLogger(__name__)


def scale_quantity(priced: PricedItem) -> PricedItem:
    """
    Multiplie le total courant par la quantité; les sous-totaux séparés ne sont
    jamais multipliés. Un item récurrent n'est pas multiplié (achat multi-places
    récurrent non défini): la quantité est ignorée et signalée.
    """
    qty = priced.item.qty
    if qty <= 1:
        return priced
    if priced.mode is PricingMode.RECURRING:
        logger.warning("pricing.quantity ignored for recurring item=%s qty=%s", priced.item.gu_id, qty)
        return priced
    return replace(priced, running_total=round2(priced.running_total * Decimal(qty)))
