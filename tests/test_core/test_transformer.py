import pytest

from app.core.exceptions import TransformationError
from app.services.transformer import extract_order_id, normalize_date, transform_order


# ==========================================================
# extract_order_id
# ==========================================================

@pytest.mark.parametrize(
    "numero, expected",
    [
        ("v10089015vdb-01", "v10089015vdb"),
        ("v1-01-02", "v1"),
        ("semsufixo", "semsufixo"),
    ],
)
def test_extract_order_id(numero, expected):
    assert extract_order_id(numero) == expected


# ==========================================================
# normalize_date
# ==========================================================

def test_normalize_date_only_is_utc_midnight():
    assert normalize_date("2025-01-01") == "2025-01-01T00:00:00.000Z"


def test_normalize_date_keeps_milliseconds():
    assert normalize_date("2023-07-19T12:24:11.529Z") == "2023-07-19T12:24:11.529Z"


def test_normalize_date_converts_offset_to_utc():
    assert normalize_date("2023-07-19T09:24:11-03:00") == "2023-07-19T12:24:11.000Z"


def test_normalize_date_epoch_millis():
    assert normalize_date(0) == "1970-01-01T00:00:00.000Z"


def test_normalize_date_invalid():
    with pytest.raises(ValueError):
        normalize_date("ontem")


# ==========================================================
# transform_order
# ==========================================================

def test_transform_order_maps_all_fields(make_payload):
    result = transform_order(make_payload())

    assert result.order_id == "v100"
    assert result.value == 50.5
    assert result.creation_date == "2025-01-01T00:00:00.000Z"
    assert len(result.items) == 1
    item = result.items[0]
    assert item.product_id == 7
    assert isinstance(item.product_id, int)
    assert item.quantity == 2
    assert item.price == 10.25


def test_transform_order_serializes_camel_case(make_payload):
    dumped = transform_order(make_payload()).model_dump(by_alias=True)
    assert dumped == {
        "orderId": "v100",
        "value": 50.5,
        "creationDate": "2025-01-01T00:00:00.000Z",
        "items": [{"productId": 7, "quantity": 2, "price": 10.25}],
    }


def test_transform_order_does_not_mutate_input(make_payload):
    payload = make_payload()
    snapshot = {**payload, "items": [dict(i) for i in payload["items"]]}
    transform_order(payload)
    assert payload == snapshot


def test_transform_order_bad_date(make_payload):
    with pytest.raises(TransformationError) as excinfo:
        transform_order(make_payload(data="31/12/2024"))
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_transform_order_non_numeric_product_id(make_payload):
    payload = make_payload(items=[{"idItem": "abc", "quantidadeItem": 1, "valorItem": 1}])
    with pytest.raises(TransformationError):
        transform_order(payload)


def test_transform_order_missing_item_field(make_payload):
    payload = make_payload(items=[{"idItem": "1", "valorItem": 1}])
    with pytest.raises(TransformationError) as excinfo:
        transform_order(payload)
    assert "quantidadeItem" in excinfo.value.message


def test_transform_order_missing_top_level_field(make_payload):
    payload = make_payload()
    del payload["numeroPedido"]
    with pytest.raises(TransformationError):
        transform_order(payload)


def test_transform_order_empty_order_id(make_payload):
    with pytest.raises(TransformationError):
        transform_order(make_payload(numero="-01"))


def test_transformation_error_is_not_a_validation_error(make_payload):
    from app.core.exceptions import StorageError, ValidationError

    with pytest.raises(TransformationError) as excinfo:
        transform_order(make_payload(data="nope"))
    assert not isinstance(excinfo.value, (ValidationError, StorageError))
    assert excinfo.value.status_code == 500
