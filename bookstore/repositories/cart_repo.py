# bookstore/repositories/cart_repo.py
import uuid

from sqlmodel import Session, select

from bookstore.models.cart import Cart, CartLine


class CartRepository:
    """
    Data access for carts and their lines.

    No locking: two concurrent writers on the same cart simply race and
    the last commit wins.
    """

    # ---- Carts ----

    def get_for_user(self, session: Session, user_id: uuid.UUID) -> Cart | None:
        stmt = select(Cart).where(Cart.user_id == user_id)
        return session.exec(stmt).first()

    def save(self, session: Session, cart: Cart) -> Cart:
        session.add(cart)
        session.commit()
        session.refresh(cart)
        return cart

    def delete_for_user(self, session: Session, user_id: uuid.UUID) -> bool:
        cart = self.get_for_user(session, user_id)
        if cart is None:
            return False
        for line in self.list_lines(session, cart.id):
            session.delete(line)
        session.delete(cart)
        session.commit()
        return True

    # ---- Lines ----

    def list_lines(self, session: Session, cart_id: uuid.UUID) -> list[CartLine]:
        stmt = (
            select(CartLine)
            .where(CartLine.cart_id == cart_id)
            .order_by(CartLine.position)
        )
        return list(session.exec(stmt).all())

    def save_lines(
        self,
        session: Session,
        cart: Cart,
        keep: list[CartLine],
        drop: list[CartLine],
    ) -> Cart:
        """
        Persist a cart together with its line changes in one commit.
        """
        session.add(cart)
        for line in keep:
            session.add(line)
        for line in drop:
            session.delete(line)
        session.commit()
        session.refresh(cart)
        return cart
