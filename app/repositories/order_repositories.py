from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.models.order_models import Order, OrderItem
from app.schemas.order_schemas import OrderData, OrderItemData


class OrderRepository:
    """Data Access Layer for Order and OrderItem models.

    Aucune méthode ne commit : la transaction appartient au service.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------- READ ----------
    def get(self, order_id: str) -> Optional[Order]:
        """Get an order by its business key (orderId)."""
        stmt = select(Order).where(Order.order_id == order_id)
        return self.db.scalars(stmt).first()

    def list(self) -> List[Order]:
        """
        All orders, most recent first, with their items.
        selectinload = une requête pour les orders, une pour tous leurs items.
        """
        stmt = (
            select(Order)
            .options(selectinload(Order.items))
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list(self.db.scalars(stmt).all())

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(Order)) or 0

    # ---------- WRITE ----------
    def add(self, order_in: OrderData) -> Order:
        """Insert the order row only. Raises IntegrityError on duplicate orderId."""
        db_order = Order(
            order_id=order_in.order_id,
            value=order_in.value,
            creation_date=order_in.creation_date,
        )
        self.db.add(db_order)
        self.db.flush()
        return db_order

    def add_items(self, order: Order, items: Iterable[OrderItemData]) -> None:
        for item in items:
            order.items.append(
                OrderItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=item.price,
                )
            )
        self.db.flush()

    def update(self, order: Order, order_in: OrderData) -> Order:
        order.value = order_in.value
        order.creation_date = order_in.creation_date
        self.db.flush()
        return order

    def clear_items(self, order: Order) -> None:
        """Remove every item of the order (delete-orphan)."""
        order.items.clear()
        self.db.flush()

    def delete(self, order: Order) -> None:
        """Delete the order; items follow through ON DELETE CASCADE."""
        self.db.delete(order)
        self.db.flush()
