"""
Module 'pricing' (feature-first): moteur de calcul du panier, sans I/O.
Réunit normalisation du prix, décomposition récurrente, offres, frais/taxe,
quantité et construction des lignes de paiement.
"""

from .enums import MembershipType, DiscountType, PaymentType, ProductType, PricingMode
from .amounts import round2, percentage_of, to_amount
from .models import (
    CheckoutItem,
    UserForm,
    Offer,
    RecurringMembershipConfig,
    RecurringDonation,
    RecurringInfo,
    TenantFees,
    CartSummary,
    PricedItem,
)
from .normalizer import effective_price, normalize, get_filter_by_price, filter_by_price_dicts
from .recurring import resolve_mode, decompose, build_recurring_info
from .offers import OfferResult, process_offer, discount_is_valid, apply_offer
from .fees import apply_discount, apply_card_fees, apply_tax, compose
from .quantity import scale_quantity
from .calculator import CartCalculation, calculate_cart_summary, to_summary
from .line_items import get_item_list, get_product_type, resolve_product

__all__ = [
    # enums
    "MembershipType",
    "DiscountType",
    "PaymentType",
    "ProductType",
    "PricingMode",
    # montants
    "round2",
    "percentage_of",
    "to_amount",
    # modèles
    "CheckoutItem",
    "UserForm",
    "Offer",
    "RecurringMembershipConfig",
    "RecurringDonation",
    "RecurringInfo",
    "TenantFees",
    "CartSummary",
    "PricedItem",
    # étapes
    "effective_price",
    "normalize",
    "get_filter_by_price",
    "filter_by_price_dicts",
    "resolve_mode",
    "decompose",
    "build_recurring_info",
    "OfferResult",
    "process_offer",
    "discount_is_valid",
    "apply_offer",
    "apply_discount",
    "apply_card_fees",
    "apply_tax",
    "compose",
    "scale_quantity",
    # pipeline
    "CartCalculation",
    "calculate_cart_summary",
    "to_summary",
    "get_item_list",
    "get_product_type",
    "resolve_product",
]
