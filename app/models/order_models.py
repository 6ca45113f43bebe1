from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column("orderId", String, unique=True, nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    creation_date: Mapped[str] = mapped_column("creationDate", String, nullable=False)

    # Date d'insertion, sert uniquement au tri de la liste
    created_at: Mapped[datetime] = mapped_column(
        "createdAt", DateTime, server_default=func.now(), nullable=False
    )

    # Relation to order items
    items: Mapped[List["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    __tablename__ = "items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(
        "orderId", ForeignKey("orders.orderId", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column("productId", Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)

    # Relation back to the order
    order: Mapped[Order] = relationship(back_populates="items")
