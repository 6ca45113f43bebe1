from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.repositories.order_repositories import OrderRepository
from app.schemas.order_schemas import (
    OrderCreatedData,
    OrderCreatedResponse,
    OrderData,
    OrderDeletedResponse,
    OrderListResponse,
    OrderResponse,
)
from app.services.order_services import OrderService


router = APIRouter(prefix="/order", tags=["orders"])
logger = logging.getLogger(__name__)

ORDER_PAYLOAD_EXAMPLE = {
    "numeroPedido": "v10089015vdb-01",
    "valorTotal": 10000,
    "dataCriacao": "2023-07-19T12:24:11.529Z",
    "items": [{"idItem": "2434", "quantidadeItem": 1, "valorItem": 1000}],
}


# ---------- Dependency injection ----------
def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Construit un OrderService sur la session de la requête."""
    return OrderService(OrderRepository(db))


# ---------- Endpoints CRUD ----------

@router.post("", response_model=OrderCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: Dict[str, Any] = Body(..., examples=[ORDER_PAYLOAD_EXAMPLE]),
    svc: OrderService = Depends(get_order_service),
):
    """Criar um novo pedido a partir do payload externo."""
    logger.info("POST /order recebido")
    order = svc.create_order(payload)
    return OrderCreatedResponse(
        message="Pedido criado com sucesso",
        data=OrderCreatedData.model_validate(order),
    )


# /order/list doit être déclaré avant /order/{order_id}
@router.get("/list", response_model=OrderListResponse)
def list_orders(svc: OrderService = Depends(get_order_service)):
    """Listar todos os pedidos, do mais recente ao mais antigo."""
    orders = [OrderData.model_validate(o) for o in svc.get_all_orders()]
    return OrderListResponse(count=len(orders), data=orders)


@router.get("/{order_id}", response_model=OrderResponse, response_model_exclude_none=True)
def get_order(order_id: str, svc: OrderService = Depends(get_order_service)):
    """Obter um pedido pelo orderId."""
    logger.info("Buscando pedido %s", order_id)
    return OrderResponse(data=OrderData.model_validate(svc.get_order(order_id)))


@router.put("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: str,
    payload: Dict[str, Any] = Body(..., examples=[ORDER_PAYLOAD_EXAMPLE]),
    svc: OrderService = Depends(get_order_service),
):
    """Atualizar um pedido: substitui valor, data e todos os itens."""
    logger.info("Atualizando pedido %s", order_id)
    order = svc.update_order(order_id, payload)
    return OrderResponse(
        message="Pedido atualizado com sucesso",
        data=OrderData.model_validate(order),
    )


@router.delete("/{order_id}", response_model=OrderDeletedResponse)
def delete_order(order_id: str, svc: OrderService = Depends(get_order_service)):
    """Deletar um pedido (os itens seguem por cascade)."""
    logger.info("Deletando pedido %s", order_id)
    deleted_id = svc.delete_order(order_id)
    return OrderDeletedResponse(message="Pedido deletado com sucesso", order_id=deleted_id)
