"""
Modèle de données du moteur de prix (valeurs immuables).

Les entrées arrivent du catalogue au format JSON (camelCase, champs d'adhésion
imbriqués sous `membershipDetails`); chaque `from_dict` est tolérant: une valeur
numérique absente ou invalide devient 0, une chaîne absente devient "".
Le moteur suppose donc des entrées bien formées une fois ces objets construits.
"""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .amounts import ZERO, to_amount, to_int, as_float
from .enums import DiscountType, MembershipType, PricingMode


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass(frozen=True)
class CheckoutItem:
    gu_id: str = ""
    name: str = ""
    price: Decimal = ZERO
    is_other_price: bool = False
    qty: int = 1
    is_taxable: bool = False
    is_charge_credit_card_fees: bool = False
    currency: str = ""
    membership_type: Optional[MembershipType] = None
    registration_fees: Decimal = ZERO
    billing_freq_text: str = ""
    billing_day_of_month: Optional[int] = None
    number_of_billing_cycles: int = 0
    credits: Any = None
    subscription_plan_id: str = ""
    plan_id: str = ""
    item_type: str = ""
    org_id: str = ""
    tenant_id: str = ""
    event_gu_id: str = ""
    event_name: str = ""
    payment_type: str = ""
    frequency: Any = None
    trial_period: int = 0
    category: Optional[Dict[str, Any]] = None
    donation_category: Optional[Dict[str, Any]] = None

    @property
    def is_recurring(self) -> bool:
        return self.membership_type is MembershipType.RECURRING

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CheckoutItem":
        data = data or {}
        details = data.get("membershipDetails") or {}

        def pick(key: str) -> Any:
            value = details.get(key)
            return data.get(key) if value is None else value

        raw_type = pick("membershipType")
        membership_type = MembershipType.parse(raw_type, MembershipType.ONE_TIME) if raw_type else None
        qty = to_int(data.get("qty"), 1)
        billing_day = to_int(pick("billingDayOfMonth"), 0)

        return cls(
            gu_id=_text(data.get("guId") or data.get("_id")),
            name=_text(data.get("name")),
            price=to_amount(data.get("price")),
            is_other_price=_flag(data.get("isOtherPrice")),
            qty=qty if qty >= 1 else 1,
            is_taxable=_flag(data.get("isTaxable")),
            is_charge_credit_card_fees=_flag(data.get("isChargeCreditCardFees")),
            currency=_text(data.get("currency")),
            membership_type=membership_type,
            registration_fees=to_amount(pick("registrationFees")),
            billing_freq_text=_text(pick("billingFreqText")),
            billing_day_of_month=billing_day or None,
            number_of_billing_cycles=to_int(pick("numberOfBillingCycles"), 0),
            credits=pick("credits"),
            subscription_plan_id=_text(pick("subscriptionPlanId")),
            plan_id=_text(data.get("planId")),
            item_type=_text(data.get("itemType")),
            org_id=_text(data.get("orgId")),
            tenant_id=_text(data.get("tenantId")),
            event_gu_id=_text(data.get("eventGuId")),
            event_name=_text(data.get("eventName")),
            payment_type=_text(data.get("paymentType")),
            frequency=data.get("frequency"),
            trial_period=to_int(data.get("trialPeriod"), 0),
            category=data.get("category") or None,
            donation_category=data.get("donationCategory") or None,
        )

    def for_event(self, event: Dict[str, Any], org_id: str = "", tenant_id: str = "") -> "CheckoutItem":
        """Rattache l'item à un événement (checkout événement): id, nom, type de paiement."""
        return replace(
            self,
            event_gu_id=_text((event or {}).get("guId")),
            event_name=_text((event or {}).get("name")),
            payment_type=_text((event or {}).get("paymentType")) or "paid",
            org_id=org_id or self.org_id,
            tenant_id=tenant_id or self.tenant_id,
        )


@dataclass(frozen=True)
class UserForm:
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    email: str = ""
    phone: str = ""
    note: str = ""
    other_price: Optional[Decimal] = None
    guardians: List[Any] = field(default_factory=list)
    custom_fields: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserForm":
        data = data or {}
        raw_other = data.get("otherPrice")
        other_price = to_amount(raw_other, None) if raw_other not in (None, "") else None
        return cls(
            first_name=_text(data.get("firstName")),
            last_name=_text(data.get("lastName")),
            full_name=_text(data.get("fullName")),
            email=_text(data.get("email")),
            phone=_text(data.get("phone")),
            note=_text(data.get("note")),
            other_price=other_price,
            guardians=list(data.get("guardians") or []),
            custom_fields=list(data.get("customFields") or []),
        )


@dataclass(frozen=True)
class Offer:
    gu_id: str = ""
    offer_code: str = ""
    discount: Decimal = ZERO
    discount_type: DiscountType = DiscountType.AMOUNT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Offer":
        data = data or {}
        return cls(
            gu_id=_text(data.get("guId") or data.get("_id")),
            offer_code=_text(data.get("offerCode")),
            discount=to_amount(data.get("discount")),
            discount_type=DiscountType.parse(data.get("discountType"), DiscountType.AMOUNT),
        )


@dataclass(frozen=True)
class RecurringMembershipConfig:
    billing_freq_text: str = ""
    billing_day_of_month: Optional[int] = None
    number_of_billing_cycles: int = 0
    registration_fees: Decimal = ZERO

    @classmethod
    def from_item(cls, item: CheckoutItem) -> Optional["RecurringMembershipConfig"]:
        if not item.is_recurring:
            return None
        return cls(
            billing_freq_text=item.billing_freq_text,
            billing_day_of_month=item.billing_day_of_month,
            number_of_billing_cycles=item.number_of_billing_cycles,
            registration_fees=item.registration_fees,
        )


@dataclass(frozen=True)
class RecurringDonation:
    is_donation_recurring: bool = False
    frequency: Any = None
    limit: Any = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RecurringDonation":
        data = data or {}
        return cls(
            is_donation_recurring=_flag(data.get("isDonationRecurring")),
            frequency=data.get("donationRecurringFrequency"),
            limit=data.get("donationRecurringLimit"),
        )


@dataclass(frozen=True)
class TenantFees:
    tax_percent: Decimal = ZERO
    card_fees_percent: Decimal = ZERO
    bank_fees_percent: Decimal = ZERO
    currency: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TenantFees":
        data = data or {}
        tax = data.get("tax")
        return cls(
            tax_percent=to_amount(data.get("taxPercent") if tax is None else tax),
            card_fees_percent=to_amount(data.get("cardFees")),
            bank_fees_percent=to_amount(data.get("bankFees")),
            currency=_text(data.get("currency")),
        )


@dataclass(frozen=True)
class RecurringInfo:
    processing_fees: Decimal = ZERO
    next_billing_period: str = "Today"
    billing_ends_after: str = "Manual Request"
    billing_freq_text: str = ""
    is_first_month_fees: bool = False
    is_last_month_fees: bool = False
    has_trial_period: str = ""
    trial_duration: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isFirstMonthFees": self.is_first_month_fees,
            "isLastMonthFees": self.is_last_month_fees,
            "processingFees": as_float(self.processing_fees),
            "nextBillingPeriod": self.next_billing_period,
            "hasTrialPeriod": self.has_trial_period,
            "trialDuration": self.trial_duration,
            "billingFreqText": self.billing_freq_text,
            "billingEndsAfter": self.billing_ends_after,
        }


@dataclass(frozen=True)
class CartSummary:
    total_price: Decimal = ZERO
    total_tax: Decimal = ZERO
    card_fees: Decimal = ZERO
    item_discount: Decimal = ZERO
    tax_percent: Decimal = ZERO
    card_percent: Decimal = ZERO
    bank_fees: Decimal = ZERO
    bank_percent: Decimal = ZERO
    show_taxable: bool = False
    show_card_fees: bool = False
    show_bank_fees: bool = False
    recurring_info: Optional[RecurringInfo] = None
    total_tax_sub: Decimal = ZERO
    total_tax_reg: Decimal = ZERO
    card_fees_on_price_amt: Decimal = ZERO
    card_fees_on_amt: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPrice": as_float(self.total_price),
            "totalTax": as_float(self.total_tax),
            "cardFees": as_float(self.card_fees),
            "itemDiscount": as_float(self.item_discount),
            "taxPercent": as_float(self.tax_percent),
            "cardPercent": as_float(self.card_percent),
            "bankFees": as_float(self.bank_fees),
            "bankPercent": as_float(self.bank_percent),
            "showTaxable": self.show_taxable,
            "showCardFees": self.show_card_fees,
            "showBankFees": self.show_bank_fees,
            "recurringInfo": self.recurring_info.to_dict() if self.recurring_info else None,
            "totalTaxSub": as_float(self.total_tax_sub),
            "totalTaxReg": as_float(self.total_tax_reg),
            "cardFeesOnPriceAmt": as_float(self.card_fees_on_price_amt),
            "cardFeesOnAmt": as_float(self.card_fees_on_amt),
        }


@dataclass(frozen=True)
class PricedItem:
    """
    État du pipeline pour un item. Chaque étape renvoie une nouvelle valeur
    (dataclasses.replace) en reprenant les champs déjà calculés.

    - base_price: prix effectif (catalogue ou prix libre)
    - item_price / registration_fee: sous-totaux après remise (prix, frais d'inscription)
    - running_total: total courant, seul montant multiplié par la quantité
    """
    item: CheckoutItem
    mode: PricingMode = PricingMode.ONE_TIME
    base_price: Decimal = ZERO
    subscription_price: Decimal = ZERO
    registration_fee: Decimal = ZERO
    item_price: Decimal = ZERO
    running_total: Decimal = ZERO
    discount: Decimal = ZERO
    offer_id: str = ""
    card_fees: Decimal = ZERO
    card_fees_on_price: Decimal = ZERO
    card_fees_on_registration: Decimal = ZERO
    total_tax: Decimal = ZERO
    tax_on_price: Decimal = ZERO
    tax_on_registration: Decimal = ZERO
    show_card_fees: bool = False
    show_taxable: bool = False
    recurring_info: Optional[RecurringInfo] = None

    @property
    def one_time_payment(self) -> Decimal:
        return self.item.registration_fees

    @property
    def final_subscription_amount(self) -> Decimal:
        return self.base_price + self.card_fees_on_price + self.tax_on_price

    @property
    def final_one_time_payment(self) -> Decimal:
        return self.one_time_payment + self.card_fees_on_registration + self.tax_on_registration - self.discount
