# tests/test_promo_suggestions.py
from bookstore.core.clock import now_millis
from bookstore.models.common import RecordStatus
from bookstore.schemas.cart import CartAddRequest, CartLineIn

from conftest import make_author, make_book, make_category, make_promo, make_user


def fill_cart(session, cart_service, user, *books):
    cart_service.add_lines(
        session,
        user.id,
        CartAddRequest(lines=[CartLineIn(book_id=b.id, quantity=1) for b in books]),
    )


def test_candidates_are_unscoped_or_match_a_cart_category(session, cart_service):
    user = make_user(session)
    fiction = make_category(session, "Fiction")
    poetry = make_category(session, "Poetry")
    travel = make_category(session, "Travel")
    fill_cart(
        session,
        cart_service,
        user,
        make_book(session, price=100, category=fiction),
        make_book(session, price=100, category=poetry),
    )

    unscoped = make_promo(session, name="EVERYONE")
    for_fiction = make_promo(session, name="FICTION", eligible_category_ids=[str(fiction.id)])
    for_poetry = make_promo(session, name="POETRY", eligible_category_ids=[str(poetry.id)])
    make_promo(session, name="TRAVEL", eligible_category_ids=[str(travel.id)])

    suggestions = cart_service.suggest_promo_codes(session, user.id)

    assert {s.id for s in suggestions} == {unscoped.id, for_fiction.id, for_poetry.id}
    assert all(s.is_applicable for s in suggestions)


def test_author_scoped_codes_are_candidates(session, cart_service):
    user = make_user(session)
    author = make_author(session)
    fill_cart(session, cart_service, user, make_book(session, author=author))

    code = make_promo(session, name="AUTHOR", eligible_author_ids=[str(author.id)])

    suggestions = cart_service.suggest_promo_codes(session, user.id)

    assert [s.id for s in suggestions] == [code.id]
    assert suggestions[0].details.author.matched_authors == [str(author.id)]


def test_applicable_codes_come_first_and_others_carry_a_message(session, cart_service):
    user = make_user(session)
    fill_cart(session, cart_service, user, make_book(session, price=500))

    too_big = make_promo(session, name="BIG", min_value=600)
    fits = make_promo(session, name="FITS", min_value=100)

    suggestions = cart_service.suggest_promo_codes(session, user.id)

    assert [s.id for s in suggestions] == [fits.id, too_big.id]
    assert suggestions[0].is_applicable is True
    assert suggestions[0].details is not None
    assert suggestions[1].is_applicable is False
    assert suggestions[1].details is None
    assert suggestions[1].message == (
        "Promo code not applicable - Minimum 600 amount required."
    )


def test_message_prefers_amount_over_quantity(session, cart_service):
    user = make_user(session)
    fill_cart(session, cart_service, user, make_book(session, price=100))

    make_promo(session, name="BOTH", min_value=600, min_item_count=5)

    [suggestion] = cart_service.suggest_promo_codes(session, user.id)

    assert suggestion.message.startswith("Promo code not applicable - Minimum 600")


def test_expired_used_up_and_deleted_codes_are_left_out(session, cart_service):
    user = make_user(session)
    fill_cart(session, cart_service, user, make_book(session, price=100))

    make_promo(session, name="OLD", expiry_timestamp=now_millis() - 1000)
    make_promo(
        session,
        name="USED",
        usage_limit=1,
        usages=[{"user_id": str(user.id), "count": 1}],
    )
    make_promo(session, name="GONE", status=RecordStatus.DELETED)
    live = make_promo(session, name="LIVE")

    suggestions = cart_service.suggest_promo_codes(session, user.id)

    assert [s.id for s in suggestions] == [live.id]
