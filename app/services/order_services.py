# app/services/order_services.py
from __future__ import annotations

import logging
from typing import Any, List, Mapping

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.database import transaction
from app.core.exceptions import (
    AppException,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from app.models.order_models import Order
from app.repositories.order_repositories import OrderRepository
from app.schemas.order_schemas import REQUIRED_ORDER_FIELDS, OrderData
from app.services.transformer import transform_order

logger = logging.getLogger(__name__)


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_unique_violation(exc: IntegrityError) -> bool:
    return "UNIQUE" in str(exc.orig).upper()


def validate_order_payload(payload: Mapping[str, Any], message: str) -> None:
    """Les quatre champs du pedido sont obligatoires, sinon 400 avec `required`."""
    missing = [f for f in REQUIRED_ORDER_FIELDS if _is_missing(payload.get(f))]
    if missing:
        logger.debug("payload incomplet", extra={"missing": missing})
        raise ValidationError(message, required=list(REQUIRED_ORDER_FIELDS))


class OrderService:
    """
    Couche métier pour les pedidos.
    - Valide le payload externe puis le transforme (transform_order).
    - Chaque écriture multi-statements tourne dans une seule transaction :
      aucun état partiel n'est visible en cas d'échec.
    """

    def __init__(self, repository: OrderRepository):
        self.repository = repository

    # ==========================================================
    # === Lecture ==============================================
    # ==========================================================

    def get_order(self, order_id: str) -> Order:
        try:
            order = self.repository.get(order_id)
        except SQLAlchemyError as exc:
            raise StorageError(f"Erro ao buscar pedido: {exc}") from exc
        if not order:
            logger.debug("pedido introuvable", extra={"order_id": order_id})
            raise NotFoundError(order_id)
        return order

    def get_all_orders(self) -> List[Order]:
        try:
            return self.repository.list()
        except SQLAlchemyError as exc:
            raise StorageError(f"Erro ao listar pedidos: {exc}") from exc

    def count_orders(self) -> int:
        """Best-effort : une erreur de comptage renvoie 0 (utilisé par /health)."""
        try:
            return self.repository.count()
        except SQLAlchemyError as exc:
            logger.warning("comptage des pedidos impossible: %s", exc)
            self.repository.db.rollback()
            return 0

    # ==========================================================
    # === Création =============================================
    # ==========================================================

    def create_order(self, payload: Mapping[str, Any]) -> Order:
        validate_order_payload(payload, "Campos obrigatórios ausentes")

        items = payload.get("items")
        if not isinstance(items, list) or len(items) == 0:
            raise ValidationError('O campo "items" deve ser um array com pelo menos um item')

        order_in = transform_order(payload)
        logger.info("[order.create] dados transformados", extra={"order_id": order_in.order_id})

        db = self.repository.db
        try:
            with transaction(db):
                if self.repository.get(order_in.order_id) is not None:
                    raise ConflictError(order_in.order_id)
                try:
                    db_order = self.repository.add(order_in)
                except IntegrityError as exc:
                    # insertion concurrente du même orderId
                    if _is_unique_violation(exc):
                        raise ConflictError(order_in.order_id) from exc
                    raise
                self.repository.add_items(db_order, order_in.items)
        except AppException:
            raise
        except SQLAlchemyError as exc:
            raise StorageError(f"Erro ao criar pedido: {exc}") from exc

        db.refresh(db_order)
        logger.info(
            "[order.create] pedido %s criado", db_order.order_id,
            extra={"order_id": db_order.order_id, "items": len(order_in.items)},
        )
        return db_order

    # ==========================================================
    # === Mise à jour ==========================================
    # ==========================================================

    def update_order(self, order_id: str, payload: Mapping[str, Any]) -> Order:
        """Remplace value, creationDate et tout le jeu d'items du pedido."""
        validate_order_payload(payload, "Todos os campos são obrigatórios para atualização")

        order_in: OrderData = transform_order(payload)
        if order_in.order_id != order_id:
            raise ValidationError("ID do pedido na URL não corresponde ao ID nos dados")

        db = self.repository.db
        try:
            with transaction(db):
                order = self.repository.get(order_id)
                if not order:
                    raise NotFoundError(order_id)

                self.repository.update(order, order_in)
                self.repository.clear_items(order)
                self.repository.add_items(order, order_in.items)
        except AppException:
            raise
        except SQLAlchemyError as exc:
            raise StorageError(f"Erro ao atualizar pedido: {exc}") from exc

        db.refresh(order)
        logger.info(
            "[order.update] pedido %s atualizado", order_id,
            extra={"order_id": order_id, "items": len(order_in.items)},
        )
        return order

    # ==========================================================
    # === Suppression ==========================================
    # ==========================================================

    def delete_order(self, order_id: str) -> str:
        db = self.repository.db
        try:
            with transaction(db):
                order = self.repository.get(order_id)
                if not order:
                    raise NotFoundError(order_id)
                self.repository.delete(order)
        except AppException:
            raise
        except SQLAlchemyError as exc:
            raise StorageError(f"Erro ao deletar pedido: {exc}") from exc

        logger.info("[order.delete] pedido %s deletado", order_id, extra={"order_id": order_id})
        return order_id
