# bookstore/services/pricing.py
"""
Cart pricing and promo-code eligibility.

Pipeline for one cart:
  1. gift card check (if attached)
  2. total amount / total quantity
  3. handling fee, delivery charges (random) and GST
  4. storewide random discount
  5. promo code eligibility + discount (if attached)
  6. payable amount

Fees and the storewide discount are drawn from a RandomSource on every
call. Nothing is cached between calls.
"""
import logging
import math
import random
import uuid
from typing import NamedTuple, Protocol

from sqlmodel import Session

from bookstore.core.clock import now_millis
from bookstore.core.config import Settings
from bookstore.core.errors import (
    AlreadyRedeemedError,
    ExpiredError,
    NotFoundError,
    UsageLimitExceededError,
)
from bookstore.models.cart import Cart
from bookstore.models.catalog import Book
from bookstore.models.promo_code import PromoCode
from bookstore.repositories.gift_card_repo import GiftCardRepository
from bookstore.repositories.promo_code_repo import PromoCodeRepository
from bookstore.schemas.pricing import (
    AmountDiscount,
    EligibilityReport,
    PercentDiscount,
    PriceBreakdown,
    discount_amount,
)

logger = logging.getLogger(__name__)

# Fees are drawn from [0, MAX_FEE]
MAX_FEE = 50

# Storewide discount: percent drawn from [0, MAX_DISCOUNT_PERCENT],
# reported as a flat amount once it exceeds DISCOUNT_CAP
MAX_DISCOUNT_PERCENT = 15
DISCOUNT_CAP = 100


class RandomSource(Protocol):
    def next_int(self, bound: int) -> int:
        """Return an integer in [0, bound)."""
        ...


class SystemRandomSource:
    def next_int(self, bound: int) -> int:
        return random.randrange(bound)


class ResolvedLine(NamedTuple):
    """Cart line with its book loaded (None if the book no longer exists)."""

    book_id: uuid.UUID
    quantity: int
    book: Book | None


class CostAndQuantity(NamedTuple):
    total_amount: float
    total_quantity: int


class CartPricingEngine:
    """
    Computes price breakdowns and promo-code eligibility for a cart.

    Collaborators:
      - settings: GST percentage
      - gift card / promo code repositories: lookups by id
      - random_source: fee and discount draws (stub it in tests)
    """

    def __init__(
        self,
        settings: Settings,
        gift_card_repo: GiftCardRepository,
        promo_code_repo: PromoCodeRepository,
        random_source: RandomSource | None = None,
    ):
        self.settings = settings
        self.gift_card_repo = gift_card_repo
        self.promo_code_repo = promo_code_repo
        self.random_source = random_source or SystemRandomSource()

    # ---- totals, fees, tax ----

    @staticmethod
    def total_cost_and_quantity(lines: list[ResolvedLine]) -> CostAndQuantity:
        """
        Sum of quantity x price, and of quantity.

        A line whose book (or price) is missing still counts towards the
        quantity but adds nothing to the amount.
        """
        total_amount = 0.0
        total_quantity = 0
        for line in lines:
            total_quantity += line.quantity
            if line.book is not None and line.book.price:
                total_amount += line.book.price * line.quantity
        return CostAndQuantity(total_amount, total_quantity)

    def handling_fee(self) -> int:
        return self.random_source.next_int(MAX_FEE + 1)

    def delivery_charges(self) -> int:
        return self.random_source.next_int(MAX_FEE + 1)

    def gst_charges(self, total_amount: float) -> float:
        return round(total_amount * self.settings.GST_PERCENT / 100, 2)

    def random_discount(self, total_amount: float) -> AmountDiscount | PercentDiscount:
        percent = self.random_source.next_int(MAX_DISCOUNT_PERCENT + 1)
        calculated = math.floor(total_amount * percent / 100)

        if calculated > DISCOUNT_CAP:
            return AmountDiscount(value=DISCOUNT_CAP)
        return PercentDiscount(percent=percent, amount=calculated)

    # ---- gift card ----

    def check_gift_card(self, session: Session, gift_card_id: uuid.UUID) -> float:
        """
        Validate an attached gift card and return its full amount.

        Raises:
            NotFoundError, AlreadyRedeemedError, ExpiredError
        """
        gift_card = self.gift_card_repo.get_by_id(session, gift_card_id)
        if gift_card is None:
            raise NotFoundError("Gift Card not found")

        if gift_card.is_redeemed:
            raise AlreadyRedeemedError("Gift Card has already been redeemed")

        if gift_card.expiry_timestamp and gift_card.expiry_timestamp < now_millis():
            raise ExpiredError("Gift Card has expired")

        return gift_card.amount

    # ---- promo code ----

    def get_active_promo_code(
        self,
        session: Session,
        promo_code_id: uuid.UUID,
    ) -> PromoCode:
        promo_code = self.promo_code_repo.get_active(session, promo_code_id)
        if promo_code is None:
            raise NotFoundError("Promo Code not found")
        return promo_code

    @staticmethod
    def evaluate_promo_eligibility(
        promo_code: PromoCode,
        lines: list[ResolvedLine],
        total_amount: float,
        total_quantity: int,
    ) -> EligibilityReport:
        """
        Check a promo code against a cart.

        Expiry and usage limit are hard rejects and raise. Every other
        criterion is evaluated independently and reported.

        Raises:
            ExpiredError: the code is past its expiry timestamp.
            UsageLimitExceededError: total usage reached usage_limit.
        """
        report = EligibilityReport()

        if promo_code.expiry_timestamp and promo_code.expiry_timestamp < now_millis():
            raise ExpiredError("Promo Code has expired")

        if promo_code.usage_limit and promo_code.total_usage >= promo_code.usage_limit:
            raise UsageLimitExceededError("Maximum Usage Reached")

        if promo_code.min_value and total_amount < promo_code.min_value:
            report.amount.is_applicable = False
            report.amount.message = (
                f"Promo code not applicable - Minimum {_fmt(promo_code.min_value)} "
                "amount required."
            )

        if promo_code.min_item_count and total_quantity < promo_code.min_item_count:
            report.quantity.is_applicable = False
            report.quantity.message = (
                f"Promo code not applicable: Minimum {promo_code.min_item_count} "
                "item required."
            )

        priced = [
            (line.book, line.book.price or 0)
            for line in lines
            if line.book is not None
        ]

        if promo_code.eligible_category_ids:
            cart_categories = {
                str(book.category_id) for book, _ in priced if book.category_id
            }
            matched = [
                c for c in promo_code.eligible_category_ids if c in cart_categories
            ]
            if not matched:
                report.category.is_applicable = False
                report.category.message = (
                    "Promo code not applicable - No matching category found in cart."
                )
            else:
                report.category.matched_categories = matched
                report.category.matched_category_price = sum(
                    price
                    for book, price in priced
                    if book.category_id and str(book.category_id) in matched
                )

        if promo_code.eligible_author_ids:
            cart_authors = {
                str(book.author_id) for book, _ in priced if book.author_id
            }
            matched = [a for a in promo_code.eligible_author_ids if a in cart_authors]
            if not matched:
                report.author.is_applicable = False
                report.author.message = (
                    "Promo code not applicable - No matching Author found in cart."
                )
            else:
                report.author.matched_authors = matched
                report.author.matched_author_price = sum(
                    price
                    for book, price in priced
                    if book.author_id and str(book.author_id) in matched
                )

        return report

    @staticmethod
    def promo_code_discount(
        promo_code: PromoCode,
        total_amount: float,
        report: EligibilityReport,
    ) -> float:
        """
        Discount granted by a promo code.

        Precedence:
          1. category-matched price
          2. whole cart

        The author-matched price is reported but never used as a base.
        """
        discount_type = promo_code.discount_type
        percent = promo_code.percent or 0
        max_value = promo_code.max_value or 0

        def percent_of(base: float) -> float | None:
            if discount_type == "percent":
                return base * percent / 100
            if discount_type == "percentage_with_max_value":
                return min(base * percent / 100, max_value)
            return None

        if report.category.is_applicable and report.category.matched_category_price > 0:
            amount = percent_of(report.category.matched_category_price)
            if amount is not None:
                return amount

        if discount_type == "value":
            return promo_code.value or 0

        amount = percent_of(total_amount)
        return amount if amount is not None else 0

    # ---- orchestration ----

    def compute_cart_price(
        self,
        session: Session,
        cart: Cart,
        lines: list[ResolvedLine],
        promo_code: PromoCode | None = None,
    ) -> PriceBreakdown | None:
        """
        Full price breakdown for a cart.

        `promo_code` may be passed when the caller already fetched the code
        attached to the cart; otherwise the attached code is loaded by id.

        Returns None when the attached promo code is not eligible for this
        cart. Hard rejects (missing/expired/redeemed gift card, missing,
        expired or exhausted promo code) raise.
        """
        gift_card_price = 0.0
        if cart.gift_card_id:
            gift_card_price = self.check_gift_card(session, cart.gift_card_id)

        total_amount, total_quantity = self.total_cost_and_quantity(lines)
        handling_fee = self.handling_fee()
        delivery_charges = self.delivery_charges()
        gst_charges = self.gst_charges(total_amount)
        discount = self.random_discount(total_amount)

        promo_code_price = 0.0
        if promo_code is not None and promo_code.id == cart.promo_code_id:
            applied = promo_code
        elif cart.promo_code_id:
            applied = self.get_active_promo_code(session, cart.promo_code_id)
        else:
            applied = None

        if applied is not None:
            report = self.evaluate_promo_eligibility(
                applied, lines, total_amount, total_quantity
            )
            if not report.is_eligible:
                logger.info(
                    "Promo code %s not eligible for cart %s; no price computed",
                    applied.id,
                    cart.id,
                )
                return None
            promo_code_price = self.promo_code_discount(applied, total_amount, report)

        payable_amount = round(
            total_amount
            + handling_fee
            + delivery_charges
            + gst_charges
            - discount_amount(discount)
            - gift_card_price
            - promo_code_price,
            2,
        )

        return PriceBreakdown(
            total_amount=total_amount,
            total_quantity=total_quantity,
            handling_fee=handling_fee,
            delivery_charges=delivery_charges,
            gst_charges=gst_charges,
            discount=discount,
            gift_card_price=gift_card_price,
            promo_code_price=promo_code_price,
            payable_amount=payable_amount,
        )


def _fmt(value: float) -> str:
    """Render 600.0 as "600" in user-facing messages."""
    return str(int(value)) if float(value).is_integer() else str(value)
