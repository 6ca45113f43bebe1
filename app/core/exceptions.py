"""
Exceptions métier de l'API de pedidos.

Chaque exception porte son code HTTP ; les handlers de `app.main` les
convertissent en enveloppe `{success: false, error, ...}`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import status


class AppException(Exception):
    """Base de toutes les erreurs applicatives."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None, **extra: Any):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)


class ValidationError(AppException):
    """Entrée client absente ou mal formée."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, required: Optional[List[str]] = None):
        extra = {"required": required} if required is not None else {}
        super().__init__(message, **extra)


class NotFoundError(AppException):
    """Le pedido référencé n'existe pas."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Pedido com ID {order_id} não encontrado")


class ConflictError(AppException):
    """Violation de la clé métier unique (orderId)."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Pedido com ID {order_id} já existe")


class TransformationError(AppException):
    """Le payload externe ne peut pas être mappé vers le schéma interne."""


class StorageError(AppException):
    """Échec du moteur de stockage."""
