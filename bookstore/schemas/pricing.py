# bookstore/schemas/pricing.py
"""
Value objects produced by the cart pricing engine.

Discount and promo type details are tagged unions: pydantic picks the
variant from the `kind` / `type` field.
"""
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


# ---- Storewide random discount ----


class AmountDiscount(BaseModel):
    """Flat discount, used when the percentage would exceed the cap."""

    kind: Literal["amount"] = "amount"
    value: float


class PercentDiscount(BaseModel):
    kind: Literal["percent"] = "percent"
    percent: int
    amount: float


Discount = Annotated[
    Union[AmountDiscount, PercentDiscount],
    Field(discriminator="kind"),
]


def discount_amount(discount: AmountDiscount | PercentDiscount) -> float:
    """Amount deducted from the payable total for either variant."""
    if isinstance(discount, AmountDiscount):
        return discount.value
    return discount.amount


# ---- Promo code eligibility report ----


class CriterionResult(BaseModel):
    is_applicable: bool = True
    message: str = ""


class CategoryCriterion(CriterionResult):
    matched_categories: list[str] = []
    matched_category_price: float = 0


class AuthorCriterion(CriterionResult):
    matched_authors: list[str] = []
    matched_author_price: float = 0


class EligibilityReport(BaseModel):
    """
    Per-criterion result of checking a promo code against a cart.

    Only soft criteria appear here. Expiry and usage limit are hard
    rejects and raise instead.
    """

    amount: CriterionResult = Field(default_factory=CriterionResult)
    quantity: CriterionResult = Field(default_factory=CriterionResult)
    author: AuthorCriterion = Field(default_factory=AuthorCriterion)
    category: CategoryCriterion = Field(default_factory=CategoryCriterion)

    @property
    def is_eligible(self) -> bool:
        return (
            self.amount.is_applicable
            and self.quantity.is_applicable
            and self.category.is_applicable
            and self.author.is_applicable
        )

    def not_applicable_message(self) -> str:
        """First non-empty reason: amount, quantity, author, then category."""
        for criterion in (self.amount, self.quantity, self.author):
            if criterion.message:
                return criterion.message
        return self.category.message


# ---- Price breakdown ----


class PriceBreakdown(BaseModel):
    total_amount: float
    total_quantity: int
    handling_fee: int
    delivery_charges: int
    gst_charges: float
    discount: Discount
    gift_card_price: float
    promo_code_price: float
    payable_amount: float
