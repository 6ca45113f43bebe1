from pytest_bdd            import then, parsers, scenarios
from common_steps          import *

scenarios("../features/delete.feature")


@then(parsers.parse('the delete response should confirm "{order_id}"'))
def step_then_delete_confirmed(scenario_data, order_id):
    body = scenario_data["response"].json()
    assert body["orderId"] == order_id
    assert body["message"] == "Pedido deletado com sucesso"
