# tests/test_pricing.py
import uuid

import pytest

from bookstore.core.clock import now_millis
from bookstore.core.errors import (
    AlreadyRedeemedError,
    ExpiredError,
    NotFoundError,
    UsageLimitExceededError,
)
from bookstore.models.cart import Cart
from bookstore.models.catalog import Book
from bookstore.models.promo_code import PromoCode
from bookstore.schemas.pricing import AmountDiscount, PercentDiscount
from bookstore.services.pricing import CartPricingEngine, ResolvedLine, SystemRandomSource

from conftest import StubRandom, make_book, make_gift_card, make_promo, make_user


def line(price, quantity=1, category_id=None, author_id=None):
    book = Book(
        id=uuid.uuid4(),
        title="t",
        price=price,
        category_id=category_id,
        author_id=author_id,
    )
    return ResolvedLine(book.id, quantity, book)


def promo(**fields) -> PromoCode:
    data = {"name": "P", "discount_type": "value", "value": 50, "issuer_type": "Admin"}
    data.update(fields)
    return PromoCode(**data)


# ---- totals ----


def test_total_cost_and_quantity_sums_price_times_quantity():
    lines = [line(100, 2), line(50.5, 3)]

    total = CartPricingEngine.total_cost_and_quantity(lines)

    assert total.total_amount == pytest.approx(351.5)
    assert total.total_quantity == 5


def test_missing_book_or_price_counts_quantity_only():
    lines = [line(None, 2), ResolvedLine(uuid.uuid4(), 3, None), line(10, 1)]

    total = CartPricingEngine.total_cost_and_quantity(lines)

    assert total.total_amount == 10
    assert total.total_quantity == 6


# ---- fees, tax, storewide discount ----


def test_fees_are_integers_between_0_and_50(settings):
    engine = CartPricingEngine(settings, None, None, SystemRandomSource())

    for _ in range(300):
        for fee in (engine.handling_fee(), engine.delivery_charges()):
            assert isinstance(fee, int)
            assert 0 <= fee <= 50


def test_fees_draw_from_bound_51(pricing, random_source):
    pricing.handling_fee()
    pricing.delivery_charges()

    assert random_source.calls == [51, 51]


def test_gst_is_rounded_percentage_of_total(pricing):
    assert pricing.gst_charges(200) == 36.0
    assert pricing.gst_charges(99.99) == 18.0


def test_random_discount_percent_variant(settings):
    engine = CartPricingEngine(settings, None, None, StubRandom(10))

    discount = engine.random_discount(505)

    assert discount == PercentDiscount(percent=10, amount=50)
    assert discount.model_dump()["kind"] == "percent"


def test_random_discount_switches_to_flat_cap_above_100(settings):
    engine = CartPricingEngine(settings, None, None, StubRandom(15))

    discount = engine.random_discount(1000)

    assert discount == AmountDiscount(value=100)


# ---- promo eligibility ----


def test_expired_promo_raises_even_if_also_ineligible():
    expired = promo(expiry_timestamp=now_millis() - 1000, min_value=10_000)

    with pytest.raises(ExpiredError):
        CartPricingEngine.evaluate_promo_eligibility(expired, [line(100)], 100, 1)


def test_usage_limit_reached_raises():
    used_up = promo(
        usage_limit=2,
        usages=[{"user_id": str(uuid.uuid4()), "count": 1}, {"user_id": str(uuid.uuid4()), "count": 1}],
    )

    with pytest.raises(UsageLimitExceededError):
        CartPricingEngine.evaluate_promo_eligibility(used_up, [line(100)], 100, 1)


def test_min_value_not_met_is_reported():
    report = CartPricingEngine.evaluate_promo_eligibility(
        promo(min_value=600), [line(500)], 500, 1
    )

    assert report.amount.is_applicable is False
    assert report.amount.message == (
        "Promo code not applicable - Minimum 600 amount required."
    )
    assert report.is_eligible is False


def test_min_item_count_not_met_is_reported():
    report = CartPricingEngine.evaluate_promo_eligibility(
        promo(min_item_count=3), [line(100, 2)], 200, 2
    )

    assert report.quantity.is_applicable is False
    assert report.quantity.message == (
        "Promo code not applicable: Minimum 3 item required."
    )


def test_category_match_sums_unit_prices_of_matching_lines():
    fiction, poetry, other = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    lines = [
        line(100, 3, category_id=fiction),
        line(40, 1, category_id=poetry),
        line(70, 1, category_id=other),
    ]

    report = CartPricingEngine.evaluate_promo_eligibility(
        promo(eligible_category_ids=[str(fiction), str(poetry)]), lines, 410, 5
    )

    assert report.category.is_applicable is True
    assert report.category.matched_categories == [str(fiction), str(poetry)]
    assert report.category.matched_category_price == 140


def test_no_matching_category_is_reported():
    report = CartPricingEngine.evaluate_promo_eligibility(
        promo(eligible_category_ids=[str(uuid.uuid4())]),
        [line(100, category_id=uuid.uuid4())],
        100,
        1,
    )

    assert report.category.is_applicable is False
    assert report.category.message == (
        "Promo code not applicable - No matching category found in cart."
    )


def test_author_matching_mirrors_category_matching():
    author = uuid.uuid4()
    lines = [line(80, 2, author_id=author), line(30, 1, author_id=uuid.uuid4())]

    report = CartPricingEngine.evaluate_promo_eligibility(
        promo(eligible_author_ids=[str(author)]), lines, 190, 3
    )

    assert report.author.is_applicable is True
    assert report.author.matched_authors == [str(author)]
    assert report.author.matched_author_price == 80

    missing = CartPricingEngine.evaluate_promo_eligibility(
        promo(eligible_author_ids=[str(uuid.uuid4())]), lines, 190, 3
    )
    assert missing.author.is_applicable is False
    assert missing.author.message == (
        "Promo code not applicable - No matching Author found in cart."
    )


# ---- promo discount ----


def test_value_promo_without_scope_gives_flat_value():
    code = promo(discount_type="value", value=50)
    report = CartPricingEngine.evaluate_promo_eligibility(code, [line(500)], 500, 1)

    assert CartPricingEngine.promo_code_discount(code, 500, report) == 50


def test_percentage_with_max_value_is_capped():
    code = promo(discount_type="percentage_with_max_value", percent=20, max_value=30)
    report = CartPricingEngine.evaluate_promo_eligibility(code, [line(500)], 500, 1)

    assert CartPricingEngine.promo_code_discount(code, 500, report) == 30


def test_category_scoped_percent_promo_uses_category_matched_price():
    category = uuid.uuid4()
    code = promo(
        discount_type="percent",
        percent=10,
        eligible_category_ids=[str(category)],
    )
    lines = [line(200, 1, category_id=category), line(300, 1)]
    report = CartPricingEngine.evaluate_promo_eligibility(code, lines, 500, 2)

    assert CartPricingEngine.promo_code_discount(code, 500, report) == pytest.approx(20)


def test_category_scoped_capped_promo_uses_category_matched_price():
    category = uuid.uuid4()
    code = promo(
        discount_type="percentage_with_max_value",
        percent=20,
        max_value=30,
        eligible_category_ids=[str(category)],
    )
    lines = [line(100, 1, category_id=category), line(400, 1)]
    report = CartPricingEngine.evaluate_promo_eligibility(code, lines, 500, 2)

    assert CartPricingEngine.promo_code_discount(code, 500, report) == pytest.approx(20)


def test_author_matched_price_is_not_a_discount_base():
    category, author = uuid.uuid4(), uuid.uuid4()
    code = promo(
        discount_type="percent",
        percent=10,
        eligible_category_ids=[str(category)],
        eligible_author_ids=[str(author)],
    )
    lines = [
        line(200, 1, category_id=category),
        line(150, 1, category_id=category, author_id=author),
        line(500, 1),
    ]
    report = CartPricingEngine.evaluate_promo_eligibility(code, lines, 850, 3)

    assert report.author.matched_author_price == 150
    assert CartPricingEngine.promo_code_discount(code, 850, report) == pytest.approx(35)


def test_author_scoped_percent_promo_uses_cart_total():
    author = uuid.uuid4()
    code = promo(discount_type="percent", percent=10, eligible_author_ids=[str(author)])
    lines = [line(200, 1, author_id=author), line(300, 1)]
    report = CartPricingEngine.evaluate_promo_eligibility(code, lines, 500, 2)

    assert CartPricingEngine.promo_code_discount(code, 500, report) == pytest.approx(50)


def test_percent_promo_without_scope_uses_cart_total():
    code = promo(discount_type="percent", percent=10)
    report = CartPricingEngine.evaluate_promo_eligibility(code, [line(500)], 500, 1)

    assert CartPricingEngine.promo_code_discount(code, 500, report) == 50


# ---- gift card ----


def test_redeemed_gift_card_is_rejected(session, pricing):
    card = make_gift_card(session, make_user(session), is_redeemed=True)

    with pytest.raises(AlreadyRedeemedError):
        pricing.check_gift_card(session, card.id)


def test_expired_gift_card_is_rejected(session, pricing):
    card = make_gift_card(
        session, make_user(session), expiry_timestamp=now_millis() - 1000
    )

    with pytest.raises(ExpiredError):
        pricing.check_gift_card(session, card.id)


def test_unknown_gift_card_is_not_found(session, pricing):
    with pytest.raises(NotFoundError):
        pricing.check_gift_card(session, uuid.uuid4())


# ---- full breakdown ----


def test_compute_cart_price_breakdown(session, pricing):
    book = make_book(session, price=100)
    cart = Cart(user_id=uuid.uuid4())

    price = pricing.compute_cart_price(
        session, cart, [ResolvedLine(book.id, 2, book)]
    )

    assert price.total_amount == 200
    assert price.total_quantity == 2
    assert price.handling_fee == 10
    assert price.delivery_charges == 20
    assert price.gst_charges == 36.0
    assert price.discount == PercentDiscount(percent=0, amount=0)
    assert price.payable_amount == 266.0


def test_gift_card_can_drive_payable_negative(session, pricing):
    book = make_book(session, price=100)
    card = make_gift_card(
        session,
        make_user(session),
        amount=1000,
        expiry_timestamp=now_millis() + 60_000,
    )
    cart = Cart(user_id=uuid.uuid4(), gift_card_id=card.id)

    price = pricing.compute_cart_price(session, cart, [ResolvedLine(book.id, 1, book)])

    assert price.gift_card_price == 1000
    assert price.payable_amount == pytest.approx(100 + 10 + 20 + 18 - 1000)


def test_ineligible_attached_promo_yields_no_breakdown(session, pricing):
    book = make_book(session, price=500)
    code = make_promo(session, min_value=600)
    cart = Cart(user_id=uuid.uuid4(), promo_code_id=code.id)

    assert pricing.compute_cart_price(session, cart, [ResolvedLine(book.id, 1, book)]) is None


def test_attached_value_promo_is_deducted(session, pricing):
    book = make_book(session, price=500)
    code = make_promo(session, discount_type="value", value=50)
    cart = Cart(user_id=uuid.uuid4(), promo_code_id=code.id)

    price = pricing.compute_cart_price(session, cart, [ResolvedLine(book.id, 1, book)])

    assert price.promo_code_price == 50
    assert price.payable_amount == pytest.approx(500 + 10 + 20 + 90 - 50)
