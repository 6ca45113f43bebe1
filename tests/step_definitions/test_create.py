from pytest_bdd            import when, then, parsers, scenarios
from common_steps          import *

scenarios("../features/create.feature")


@when(parsers.parse('I create an order without the "{field}" field'))
def step_create_without_field(client, scenario_data, make_payload, field):
    payload = make_payload()
    payload.pop(field)
    scenario_data["response"] = client.post(BASE_URL, json=payload)


@when(parsers.parse('I create the order "{numero}" with an empty item list'))
def step_create_empty_items(client, scenario_data, make_payload, numero):
    scenario_data["response"] = client.post(BASE_URL, json=make_payload(numero=numero, items=[]))


@then(parsers.parse('the response order id should be "{order_id}"'))
def step_then_order_id(scenario_data, order_id):
    assert scenario_data["response"].json()["data"]["orderId"] == order_id


@then("the response should contain a surrogate id")
def step_then_surrogate_id(scenario_data):
    assert isinstance(scenario_data["response"].json()["data"]["id"], int)


@then(parsers.parse("the first item product id should be {product_id:d}"))
def step_then_first_product(scenario_data, product_id):
    assert scenario_data["response"].json()["data"]["items"][0]["productId"] == product_id


@then("the response should list the required fields")
def step_then_required(scenario_data):
    body = scenario_data["response"].json()
    assert body["required"] == ["numeroPedido", "valorTotal", "dataCriacao", "items"]
