# bookstore/services/cart_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from bookstore.core.clock import delivery_estimate
from bookstore.core.config import Settings
from bookstore.core.errors import (
    BadRequestError,
    ConflictError,
    IneligibleError,
    NotFoundError,
)
from bookstore.models.address import Address
from bookstore.models.cart import Cart, CartLine
from bookstore.models.catalog import Book
from bookstore.models.common import RecordStatus
from bookstore.models.promo_code import PromoCode
from bookstore.repositories.book_repo import BookRepository
from bookstore.repositories.cart_repo import CartRepository
from bookstore.repositories.user_repo import UserRepository
from bookstore.schemas.cart import (
    AddressCreate,
    CartAddRequest,
    CartLineIn,
    CartLineRead,
    CartMutationResult,
    CartOperation,
    CartRead,
    CartRemoveLine,
    CartRemoveRequest,
    CartSummary,
    DeliveryEstimate,
)
from bookstore.schemas.pricing import PriceBreakdown
from bookstore.schemas.promo_code import PromoCodeSuggestion
from bookstore.services.pricing import CartPricingEngine, ResolvedLine
from bookstore.services.promo_code_service import to_promo_code_read

logger = logging.getLogger(__name__)

CART_NOT_FOUND = "Cart Not Found"
CART_DELETED = "Cart has been deleted"


class CartService:
    """
    Business logic for the shopping cart.

    Responsibilities:
      - add / remove lines, clamped to each book's max_quantity
      - keep the delivery estimate fresh on every add
      - attach / detach gift cards and promo codes
      - price the cart through CartPricingEngine
      - suggest promo codes for the current cart

    Carts hold at least one line: removing the last line deletes the cart.
    """

    def __init__(
        self,
        cart_repo: CartRepository,
        book_repo: BookRepository,
        user_repo: UserRepository,
        pricing: CartPricingEngine,
        settings: Settings,
    ):
        self.cart_repo = cart_repo
        self.book_repo = book_repo
        self.user_repo = user_repo
        self.pricing = pricing
        self.settings = settings

    # ---- internal helpers ----

    def _get_cart_or_404(self, session: Session, user_id: uuid.UUID) -> Cart:
        cart = self.cart_repo.get_for_user(session, user_id)
        if not cart:
            raise NotFoundError(CART_NOT_FOUND)
        return cart

    def _resolve_lines(
        self,
        session: Session,
        lines: list[CartLine],
    ) -> list[ResolvedLine]:
        books = self.book_repo.get_many(session, [line.book_id for line in lines])
        return [
            ResolvedLine(line.book_id, line.quantity, books.get(line.book_id))
            for line in lines
        ]

    @staticmethod
    def _to_read(cart: Cart, resolved: list[ResolvedLine]) -> CartRead:
        delivery = None
        if cart.delivery_time is not None:
            delivery = DeliveryEstimate(
                date=cart.delivery_date,
                day=cart.delivery_day,
                time=cart.delivery_time,
            )

        lines = []
        for line in resolved:
            book = line.book
            lines.append(
                CartLineRead(
                    book_id=line.book_id,
                    quantity=line.quantity,
                    title=book.title if book else None,
                    price=book.price if book else None,
                    category_id=book.category_id if book else None,
                    author_id=book.author_id if book else None,
                    max_quantity=book.max_quantity if book else None,
                )
            )

        return CartRead(
            id=cart.id,
            user_id=cart.user_id,
            address_id=cart.address_id,
            currency_code=cart.currency_code,
            tip=cart.tip,
            gift_card_id=cart.gift_card_id,
            promo_code_id=cart.promo_code_id,
            delivery=delivery,
            lines=lines,
            created_at=cart.created_at,
            updated_at=cart.updated_at,
        )

    @staticmethod
    def _clamp(quantity: int, book: Book) -> int:
        if book.max_quantity is not None:
            return min(quantity, book.max_quantity)
        return quantity

    def _price(
        self,
        session: Session,
        cart: Cart,
        promo_code: PromoCode | None = None,
    ) -> PriceBreakdown | None:
        lines = self.cart_repo.list_lines(session, cart.id)
        resolved = self._resolve_lines(session, lines)
        return self.pricing.compute_cart_price(session, cart, resolved, promo_code)

    # ---- line mutations ----

    def add_lines(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartAddRequest,
    ) -> CartMutationResult:
        """
        Add books to the user's cart, creating the cart if needed.

        Rules:
          - a book id may appear only once per request
          - every book must exist and be active
          - quantities are clamped to max_quantity, both for new lines and
            after merging with an existing line
        """
        seen: set[uuid.UUID] = set()
        for line in payload.lines:
            if line.book_id in seen:
                raise ConflictError(f"Duplicate bookId found: {line.book_id}")
            seen.add(line.book_id)

        books = self.book_repo.get_many(session, seen)
        active = {
            book_id: book
            for book_id, book in books.items()
            if book.status == RecordStatus.ACTIVE
        }
        if len(active) != len(seen):
            raise NotFoundError("Book not found")

        if payload.address_id is not None:
            address = self.user_repo.get_address(session, payload.address_id)
            if not address or address.user_id != user_id:
                raise NotFoundError("Address not found")

        cart = self.cart_repo.get_for_user(session, user_id)
        if cart is None:
            cart = Cart(user_id=user_id)
            existing: list[CartLine] = []
        else:
            existing = self.cart_repo.list_lines(session, cart.id)

        by_book = {line.book_id: line for line in existing}
        next_position = max((line.position for line in existing), default=-1) + 1

        for line in payload.lines:
            book = active[line.book_id]
            current = by_book.get(line.book_id)
            if current is not None:
                current.quantity = self._clamp(current.quantity + line.quantity, book)
            else:
                by_book[line.book_id] = CartLine(
                    cart_id=cart.id,
                    book_id=line.book_id,
                    quantity=self._clamp(line.quantity, book),
                    position=next_position,
                )
                next_position += 1

        if payload.address_id is not None:
            cart.address_id = payload.address_id
        if payload.currency_code is not None:
            cart.currency_code = payload.currency_code
        if payload.tip is not None:
            cart.tip = payload.tip

        cart.delivery_date, cart.delivery_day, cart.delivery_time = delivery_estimate(
            self.settings.DELIVERY_LEAD_DAYS
        )
        cart.updated_at = datetime.now(timezone.utc)

        cart = self.cart_repo.save_lines(session, cart, list(by_book.values()), [])
        logger.info("Cart %s updated for user %s", cart.id, user_id)

        lines = self.cart_repo.list_lines(session, cart.id)
        return CartMutationResult(
            cart=True,
            updated_cart=self._to_read(cart, self._resolve_lines(session, lines)),
        )

    def remove_lines(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartRemoveRequest,
    ) -> CartMutationResult:
        """
        Remove books (or some copies of them) from the user's cart.

        Every requested book must be in the cart, otherwise nothing is
        changed. A line is dropped when no quantity is given or the
        quantity covers what the cart holds.
        """
        cart = self.cart_repo.get_for_user(session, user_id)
        if cart is None:
            return CartMutationResult(cart=False, message=CART_NOT_FOUND)

        lines = self.cart_repo.list_lines(session, cart.id)
        remaining = {line.book_id: line.quantity for line in lines}

        for line in payload.lines:
            held = remaining.get(line.book_id)
            if held is None:
                raise NotFoundError("Product does not exist in the cart")
            if line.quantity and line.quantity < held:
                remaining[line.book_id] = held - line.quantity
            else:
                del remaining[line.book_id]

        if not remaining:
            self.cart_repo.delete_for_user(session, user_id)
            logger.info("Last line removed, cart %s deleted", cart.id)
            return CartMutationResult(cart=False, message=CART_DELETED)

        keep, drop = [], []
        for line in lines:
            if line.book_id in remaining:
                line.quantity = remaining[line.book_id]
                keep.append(line)
            else:
                drop.append(line)

        cart.updated_at = datetime.now(timezone.utc)
        cart = self.cart_repo.save_lines(session, cart, keep, drop)

        lines = self.cart_repo.list_lines(session, cart.id)
        return CartMutationResult(
            cart=True,
            updated_cart=self._to_read(cart, self._resolve_lines(session, lines)),
        )

    def mutate_cart_lines(
        self,
        session: Session,
        user_id: uuid.UUID,
        lines: list[CartLineIn] | list[CartRemoveLine],
        op: CartOperation,
    ) -> CartMutationResult:
        if op == "add":
            return self.add_lines(session, user_id, CartAddRequest(lines=lines))
        if op == "remove":
            return self.remove_lines(session, user_id, CartRemoveRequest(lines=lines))
        raise BadRequestError(f"Unknown cart operation: {op}")

    # ---- read / clear ----

    def get_cart(self, session: Session, user_id: uuid.UUID) -> CartSummary:
        """
        Cart with a freshly computed price breakdown.

        Fees and the storewide discount are random, so two reads of the
        same cart may price differently.
        """
        cart = self.cart_repo.get_for_user(session, user_id)
        if cart is None:
            return CartSummary(cart=False)

        lines = self.cart_repo.list_lines(session, cart.id)
        resolved = self._resolve_lines(session, lines)
        price = self.pricing.compute_cart_price(session, cart, resolved)

        return CartSummary(
            cart=True,
            detail=self._to_read(cart, resolved),
            price_breakup=price,
        )

    def clear_cart(self, session: Session, user_id: uuid.UUID) -> CartMutationResult:
        self.cart_repo.delete_for_user(session, user_id)
        return CartMutationResult(cart=False, message=CART_DELETED)

    # ---- addresses ----

    def create_address(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: AddressCreate,
    ) -> Address:
        data = payload.model_dump()
        address = Address(user_id=user_id, **data)
        return self.user_repo.add_address(session, address)

    def list_addresses(self, session: Session, user_id: uuid.UUID) -> list[Address]:
        return self.user_repo.list_addresses(session, user_id)

    # ---- gift card ----

    def apply_gift_card(
        self,
        session: Session,
        user_id: uuid.UUID,
        gift_card_id: uuid.UUID,
    ) -> PriceBreakdown | None:
        self.pricing.check_gift_card(session, gift_card_id)
        cart = self._get_cart_or_404(session, user_id)

        cart.gift_card_id = gift_card_id
        cart.updated_at = datetime.now(timezone.utc)
        cart = self.cart_repo.save(session, cart)
        logger.info("Gift card %s applied to cart %s", gift_card_id, cart.id)

        return self._price(session, cart)

    def remove_gift_card(
        self,
        session: Session,
        user_id: uuid.UUID,
        gift_card_id: uuid.UUID,
    ) -> PriceBreakdown | None:
        cart = self.cart_repo.get_for_user(session, user_id)
        # A card attached before it was deleted can still be detached
        if cart is None or cart.gift_card_id != gift_card_id:
            if not self.pricing.gift_card_repo.get_active(session, gift_card_id):
                raise NotFoundError("Gift Card not found")
        if cart is None:
            raise NotFoundError(CART_NOT_FOUND)

        cart.gift_card_id = None
        cart.updated_at = datetime.now(timezone.utc)
        cart = self.cart_repo.save(session, cart)

        return self._price(session, cart)

    # ---- promo code ----

    def apply_promo_code(
        self,
        session: Session,
        user_id: uuid.UUID,
        promo_code_id: uuid.UUID,
    ) -> PriceBreakdown | None:
        """
        Attach a promo code after checking it against the current cart.

        Raises:
            NotFoundError: code not active, or no cart
            ExpiredError / UsageLimitExceededError: hard rejects
            IneligibleError: cart fails amount, quantity, author or
                category criteria; the report is included in the response
        """
        promo_code = self.pricing.get_active_promo_code(session, promo_code_id)
        cart = self._get_cart_or_404(session, user_id)

        lines = self._resolve_lines(session, self.cart_repo.list_lines(session, cart.id))
        total_amount, total_quantity = self.pricing.total_cost_and_quantity(lines)
        report = self.pricing.evaluate_promo_eligibility(
            promo_code, lines, total_amount, total_quantity
        )
        if not report.is_eligible:
            raise IneligibleError(report)

        cart.promo_code_id = promo_code.id
        cart.updated_at = datetime.now(timezone.utc)
        cart = self.cart_repo.save(session, cart)
        logger.info("Promo code %s applied to cart %s", promo_code.name, cart.id)

        return self._price(session, cart, promo_code)

    def remove_promo_code(
        self,
        session: Session,
        user_id: uuid.UUID,
        promo_code_id: uuid.UUID,
    ) -> PriceBreakdown | None:
        cart = self.cart_repo.get_for_user(session, user_id)
        # A code attached before it was deleted can still be detached
        if cart is None or cart.promo_code_id != promo_code_id:
            self.pricing.get_active_promo_code(session, promo_code_id)
        if cart is None:
            raise NotFoundError(CART_NOT_FOUND)

        cart.promo_code_id = None
        cart.updated_at = datetime.now(timezone.utc)
        cart = self.cart_repo.save(session, cart)

        return self._price(session, cart)

    def suggest_promo_codes(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> list[PromoCodeSuggestion]:
        """
        Promo codes worth showing for the current cart.

        Candidates are active codes that are either unscoped or scoped to
        a category / author present in the cart. Applicable ones come
        first (with the full report), then the rest with a single reason.
        Codes that are expired or used up are left out.
        """
        cart = self._get_cart_or_404(session, user_id)
        lines = self._resolve_lines(session, self.cart_repo.list_lines(session, cart.id))
        if not lines:
            raise BadRequestError("Cart is empty")

        total_amount, total_quantity = self.pricing.total_cost_and_quantity(lines)

        books = [line.book for line in lines if line.book is not None]
        category_ids = {str(b.category_id) for b in books if b.category_id}
        author_ids = {str(b.author_id) for b in books if b.author_id}

        applicable: list[PromoCodeSuggestion] = []
        not_applicable: list[PromoCodeSuggestion] = []

        candidates = self.pricing.promo_code_repo.list_candidates(
            session, category_ids, author_ids
        )
        for promo_code in candidates:
            try:
                report = self.pricing.evaluate_promo_eligibility(
                    promo_code, lines, total_amount, total_quantity
                )
            except BadRequestError as exc:
                logger.info(
                    "Skipping promo code %s in suggestions: %s",
                    promo_code.name,
                    exc.detail,
                )
                continue

            read = to_promo_code_read(promo_code).model_dump()
            if report.is_eligible:
                applicable.append(
                    PromoCodeSuggestion(**read, is_applicable=True, details=report)
                )
            else:
                not_applicable.append(
                    PromoCodeSuggestion(
                        **read,
                        is_applicable=False,
                        message=report.not_applicable_message(),
                    )
                )

        return applicable + not_applicable
