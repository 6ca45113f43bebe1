from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# JSON en camelCase (orderId, creationDate, productId) ; les noms Python
# restent acceptés pour la construction depuis l'ORM.
_CAMEL_OUT = ConfigDict(
    from_attributes=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


# ---------- Payload externe (numeroPedido, valorTotal, ...) ----------

# NaN et Infinity ne survivent pas au stockage SQLite (NaN devient NULL)
_FINITE_ONLY = ConfigDict(allow_inf_nan=False)


class ExternalItem(BaseModel):
    model_config = _FINITE_ONLY

    idItem: int = Field(..., description="ID do produto, aceita string numérica")
    quantidadeItem: int = Field(..., description="Quantidade do item")
    valorItem: float = Field(..., description="Preço unitário do item")


class ExternalOrder(BaseModel):
    model_config = _FINITE_ONLY

    numeroPedido: str = Field(..., description="Número do pedido, ex: v10089015vdb-01")
    valorTotal: float
    dataCriacao: str | int | float
    items: List[ExternalItem]


REQUIRED_ORDER_FIELDS = ["numeroPedido", "valorTotal", "dataCriacao", "items"]


# ---------- Schéma interne ----------

class OrderItemData(BaseModel):
    model_config = _CAMEL_OUT

    product_id: int
    quantity: int
    price: float


class OrderData(BaseModel):
    """Pedido au format interne, aussi utilisé comme forme de réponse."""

    model_config = _CAMEL_OUT

    order_id: str
    value: float
    creation_date: str
    items: List[OrderItemData] = []


class OrderCreatedData(OrderData):
    id: int


# ---------- Enveloppes de réponse ----------

class OrderResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: OrderData


class OrderCreatedResponse(BaseModel):
    success: bool = True
    message: str
    data: OrderCreatedData


class OrderListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[OrderData]


class OrderDeletedResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str
    order_id: str
