from decimal import Decimal

from checkout_backend.pricing import (
    CheckoutItem,
    UserForm,
    Offer,
    TenantFees,
    RecurringMembershipConfig,
    RecurringDonation,
    MembershipType,
    DiscountType,
    PricingMode,
    effective_price,
    normalize,
    get_filter_by_price,
    filter_by_price_dicts,
)


def test_item_from_dict_reads_nested_membership_details():
    item = CheckoutItem.from_dict({
        "guId": "i1",
        "price": "50",
        "qty": 0,
        "membershipDetails": {"membershipType": "recurring", "registrationFees": 25, "numberOfBillingCycles": 6},
    })
    assert item.gu_id == "i1"
    assert item.price == Decimal("50")
    assert item.qty == 1
    assert item.membership_type is MembershipType.RECURRING
    assert item.is_recurring is True
    assert item.registration_fees == Decimal("25")
    assert item.number_of_billing_cycles == 6


def test_item_from_dict_flat_fields_and_defaults():
    item = CheckoutItem.from_dict({"_id": "x", "price": None, "isTaxable": "true", "registrationFees": "abc"})
    assert item.gu_id == "x"
    assert item.price == Decimal("0")
    assert item.is_taxable is True
    assert item.membership_type is None
    assert item.registration_fees == Decimal("0")
    assert RecurringMembershipConfig.from_item(item) is None


def test_item_for_event_defaults_payment_type_to_paid():
    item = CheckoutItem.from_dict({"guId": "i1", "orgId": "o"}).for_event({"guId": "e1", "name": "Gala"}, tenant_id="t")
    assert item.event_gu_id == "e1"
    assert item.event_name == "Gala"
    assert item.payment_type == "paid"
    assert item.org_id == "o"
    assert item.tenant_id == "t"


def test_user_form_other_price():
    assert UserForm.from_dict({"otherPrice": "15.5"}).other_price == Decimal("15.5")
    assert UserForm.from_dict({"otherPrice": ""}).other_price is None
    assert UserForm.from_dict({"otherPrice": "n/a"}).other_price is None
    assert UserForm.from_dict({}).other_price is None


def test_offer_and_fees_from_dict():
    offer = Offer.from_dict({"_id": "o1", "discount": "10", "discountType": "percentage"})
    assert offer.gu_id == "o1"
    assert offer.discount_type is DiscountType.PERCENTAGE
    assert Offer.from_dict({"discount": 5}).discount_type is DiscountType.AMOUNT

    fees = TenantFees.from_dict({"taxPercent": 7, "cardFees": "2.9", "currency": "CAD"})
    assert fees.tax_percent == Decimal("7")
    assert fees.card_fees_percent == Decimal("2.9")
    assert fees.bank_fees_percent == Decimal("0")
    assert TenantFees.from_dict({"tax": 5, "taxPercent": 9}).tax_percent == Decimal("5")


def test_recurring_donation_from_dict():
    donation = RecurringDonation.from_dict({
        "isDonationRecurring": True,
        "donationRecurringFrequency": "monthly",
        "donationRecurringLimit": 12,
    })
    assert donation.is_donation_recurring is True
    assert donation.frequency == "monthly"
    assert donation.limit == 12


def test_effective_price_uses_other_price_only_when_allowed():
    free_item = CheckoutItem(price=Decimal("10"), is_other_price=True)
    fixed_item = CheckoutItem(price=Decimal("10"))
    assert effective_price(free_item, UserForm(other_price=Decimal("25"))) == Decimal("25")
    assert effective_price(free_item, UserForm(other_price=Decimal("0"))) == Decimal("10")
    assert effective_price(free_item, UserForm()) == Decimal("10")
    assert effective_price(free_item, None) == Decimal("10")
    assert effective_price(fixed_item, UserForm(other_price=Decimal("25"))) == Decimal("10")


def test_normalize_seeds_priced_item():
    item = CheckoutItem(price=Decimal("40"), registration_fees=Decimal("5"))
    priced = normalize(item, None, PricingMode.ONE_TIME)
    assert priced.base_price == Decimal("40")
    assert priced.item_price == Decimal("40")
    assert priced.running_total == Decimal("40")
    assert priced.registration_fee == Decimal("5")
    assert priced.mode is PricingMode.ONE_TIME


def test_get_filter_by_price_orders_fixed_then_other():
    items = [
        CheckoutItem(gu_id="other", price=Decimal("0"), is_other_price=True),
        CheckoutItem(gu_id="b", price=Decimal("30")),
        CheckoutItem(gu_id="a", price=Decimal("10")),
    ]
    ordered = get_filter_by_price(items)
    assert [i.gu_id for i in ordered] == ["a", "b", "other"]
    assert get_filter_by_price(None) == []


def test_filter_by_price_dicts_coerces_prices():
    ordered = filter_by_price_dicts([
        {"guId": "free", "price": None, "isOtherPrice": 1},
        {"guId": "vip", "price": "80"},
        {"guId": "std", "price": 20},
    ])
    assert [m["guId"] for m in ordered] == ["std", "vip", "free"]
    assert ordered[1]["price"] == 80.0
    assert ordered[2]["isOtherPrice"] is True


def test_filter_by_price_reads_string_flags():
    ordered = filter_by_price_dicts([
        {"guId": "a", "price": 5, "isOtherPrice": "false"},
        {"guId": "b", "price": 10},
        {"guId": "c", "price": 1, "isOtherPrice": "true"},
    ])
    assert [m["guId"] for m in ordered] == ["a", "b", "c"]
    assert ordered[0]["isOtherPrice"] is False
    assert [m["guId"] for m in get_filter_by_price([{"guId": "x", "price": 3, "isOtherPrice": "0"}])] == ["x"]
