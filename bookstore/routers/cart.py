# bookstore/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from bookstore.core.auth import require_user
from bookstore.core.config import get_settings
from bookstore.database import get_session
from bookstore.models.user import User
from bookstore.repositories.book_repo import BookRepository
from bookstore.repositories.cart_repo import CartRepository
from bookstore.repositories.gift_card_repo import GiftCardRepository
from bookstore.repositories.promo_code_repo import PromoCodeRepository
from bookstore.repositories.user_repo import UserRepository
from bookstore.schemas.cart import (
    CartAddRequest,
    CartMutationResult,
    CartRemoveRequest,
    CartSummary,
)
from bookstore.schemas.pricing import PriceBreakdown
from bookstore.schemas.promo_code import PromoCodeSuggestion
from bookstore.services.cart_service import CartService
from bookstore.services.pricing import CartPricingEngine

router = APIRouter(prefix="/cart", tags=["Cart"])

settings = get_settings()

pricing = CartPricingEngine(settings, GiftCardRepository(), PromoCodeRepository())
service = CartService(
    CartRepository(),
    BookRepository(),
    UserRepository(),
    pricing,
    settings,
)


@router.get("", response_model=CartSummary)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Current user's cart with a price breakdown.

    `price_breakup` is null when the attached promo code no longer
    applies to the cart.
    """
    return service.get_cart(session, current_user.id)


@router.put("/add", response_model=CartMutationResult)
def add_to_cart(
    payload: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Add books to the cart (creates the cart on first use).

    Quantities above a book's max_quantity are clamped.
    """
    return service.add_lines(session, current_user.id, payload)


@router.put("/remove", response_model=CartMutationResult)
def remove_from_cart(
    payload: CartRemoveRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Remove books (or copies) from the cart.

    Removing the last line deletes the cart.
    """
    return service.remove_lines(session, current_user.id, payload)


@router.delete("", response_model=CartMutationResult)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    return service.clear_cart(session, current_user.id)


# -------- Gift card --------


@router.put("/gift-card/{gift_card_id}", response_model=PriceBreakdown | None)
def apply_gift_card(
    gift_card_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    return service.apply_gift_card(session, current_user.id, gift_card_id)


@router.delete("/gift-card/{gift_card_id}", response_model=PriceBreakdown | None)
def remove_gift_card(
    gift_card_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    return service.remove_gift_card(session, current_user.id, gift_card_id)


# -------- Promo code --------


@router.put("/promo-code/{promo_code_id}", response_model=PriceBreakdown | None)
def apply_promo_code(
    promo_code_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Attach a promo code.

    Responds 400 with the per-criterion eligibility report when the cart
    does not qualify.
    """
    return service.apply_promo_code(session, current_user.id, promo_code_id)


@router.delete("/promo-code/{promo_code_id}", response_model=PriceBreakdown | None)
def remove_promo_code(
    promo_code_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    return service.remove_promo_code(session, current_user.id, promo_code_id)


@router.get("/promo-codes/suggestions", response_model=list[PromoCodeSuggestion])
def suggest_promo_codes(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Promo codes relevant to the cart: applicable ones first, then the
    rest with the reason they do not apply.
    """
    return service.suggest_promo_codes(session, current_user.id)
