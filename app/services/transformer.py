"""
Mapping du payload externe vers le schéma interne.

    numeroPedido "v10089015vdb-01"  ->  orderId "v10089015vdb"
    valorTotal                      ->  value
    dataCriacao "2025-01-01"        ->  creationDate "2025-01-01T00:00:00.000Z"
    items[].idItem "7"              ->  items[].productId 7
    items[].quantidadeItem          ->  items[].quantity
    items[].valorItem               ->  items[].price

Pas d'I/O ici : toute erreur de forme devient une TransformationError.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import TransformationError
from app.schemas.order_schemas import ExternalOrder, OrderData, OrderItemData


def extract_order_id(numero_pedido: str) -> str:
    """Retire le suffixe `-xx` : tout ce qui précède le premier tiret."""
    return numero_pedido.split("-", 1)[0]


def normalize_date(raw: str | int | float) -> str:
    """
    Renvoie la date en ISO-8601 UTC à la milliseconde, suffixe `Z`.
    Les dates sans fuseau sont lues en UTC, un nombre est un epoch en millisecondes.
    """
    if isinstance(raw, (int, float)):
        parsed = datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
    else:
        parsed = datetime.fromisoformat(raw.strip())

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    parsed = parsed.astimezone(timezone.utc)
    return parsed.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def transform_order(payload: Mapping[str, Any]) -> OrderData:
    """Transforme un pedido externe en OrderData."""
    try:
        external = ExternalOrder.model_validate(payload)
        creation_date = normalize_date(external.dataCriacao)
    except (PydanticValidationError, ValueError, TypeError, OverflowError, OSError) as exc:
        raise TransformationError(f"Erro na transformação de dados: {exc}") from exc

    order_id = extract_order_id(external.numeroPedido)
    if not order_id.strip():
        raise TransformationError(
            f"Erro na transformação de dados: numeroPedido inválido ({external.numeroPedido!r})"
        )

    return OrderData(
        order_id=order_id,
        value=external.valorTotal,
        creation_date=creation_date,
        items=[
            OrderItemData(
                product_id=item.idItem,
                quantity=item.quantidadeItem,
                price=item.valorItem,
            )
            for item in external.items
        ],
    )
