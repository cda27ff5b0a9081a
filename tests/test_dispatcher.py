"""Dispatcher behaviour: correlation, unknown methods and malformed requests."""

from __future__ import annotations

import asyncio
import warnings

import pytest

from vwaudit.protocol import INVALID_REQUEST, METHOD_NOT_FOUND, MessageFlowSimulator, MethodDispatcher
from vwaudit.protocol.envelope import VWRequest, VWResponse
from vwaudit.protocol.simulator import DEMO_ADDRESS


async def _echo(req: VWRequest) -> VWResponse:
    return VWResponse.ok(req.id, data=list(req.args))


def test_registered_method_succeeds_and_echoes_id() -> None:
    dispatcher = MethodDispatcher()
    dispatcher.register("echo", _echo)

    response = dispatcher.dispatch(VWRequest(id="abc", method="echo", args=[1, 2]))

    assert response.success is True
    assert response.id == "abc"
    assert response.data == [1, 2]
    assert response.error is None


def test_eth_request_accounts_returns_demo_address() -> None:
    simulator = MessageFlowSimulator()

    response = asyncio.run(simulator.handle_message(VWRequest(id="t1", method="eth_requestAccounts")))

    assert response.success is True
    assert response.id == "t1"
    assert response.data == ["0x1234567890123456789012345678901234567890"]
    assert response.data == [DEMO_ADDRESS]


def test_unknown_method_is_reported_not_raised() -> None:
    simulator = MessageFlowSimulator()

    response = asyncio.run(simulator.handle_message(VWRequest(id="t2", method="does_not_exist")))

    assert response.success is False
    assert response.id == "t2"
    assert response.error is not None
    assert response.error.message == METHOD_NOT_FOUND == "Method not found"


@pytest.mark.parametrize("method", [None, "", 123, ["eth_sign"]])
def test_malformed_method_yields_structured_error(method: object) -> None:
    dispatcher = MethodDispatcher()
    dispatcher.register("echo", _echo)

    response = dispatcher.dispatch(VWRequest(id="bad", method=method))

    assert response.success is False
    assert response.id == "bad"
    assert response.error is not None
    assert response.error.message == INVALID_REQUEST


def test_empty_id_is_still_served() -> None:
    dispatcher = MethodDispatcher()
    dispatcher.register("echo", _echo)

    response = dispatcher.dispatch(VWRequest(id="", method="echo"))

    assert response.success is True
    assert response.id == ""


def test_identical_requests_differing_only_in_id() -> None:
    simulator = MessageFlowSimulator()

    first = asyncio.run(simulator.handle_message(VWRequest(id="a", method="eth_sign")))
    second = asyncio.run(simulator.handle_message(VWRequest(id="b", method="eth_sign")))

    assert first.id == "a"
    assert second.id == "b"
    assert first.success == second.success
    assert first.data == second.data
    assert first.result == second.result


def test_handler_output_is_passed_through_unchecked() -> None:
    async def wrong_id(req: VWRequest) -> VWResponse:
        return VWResponse.ok("someone-else", data=["x"])

    dispatcher = MethodDispatcher()
    dispatcher.register("wrong", wrong_id)

    response = dispatcher.dispatch(VWRequest(id="mine", method="wrong"))

    assert response.id == "someone-else"
    assert response.success is True


def test_handler_exception_is_encoded() -> None:
    async def boom(req: VWRequest) -> VWResponse:
        raise RuntimeError("sdk unavailable")

    dispatcher = MethodDispatcher()
    dispatcher.register("boom", boom)

    response = dispatcher.dispatch(VWRequest(id="x", method="boom"))

    assert response.success is False
    assert response.id == "x"
    assert response.error is not None
    assert "sdk unavailable" in response.error.message


def test_register_rejects_blank_name() -> None:
    dispatcher = MethodDispatcher()

    with pytest.raises(ValueError):
        dispatcher.register("", _echo)


def test_method_table_management() -> None:
    dispatcher = MethodDispatcher()
    dispatcher.register("b", _echo)
    dispatcher.register("a", _echo)

    assert dispatcher.methods() == ["a", "b"]
    assert dispatcher.has_method("a")
    assert dispatcher.unregister("a") is True
    assert dispatcher.unregister("a") is False
    assert dispatcher.dispatch(VWRequest(id="1", method="a")).error.message == METHOD_NOT_FOUND


def test_dispatch_logs_to_injected_logger() -> None:
    import logging

    from vwaudit.diagnostics import capture_logs

    log = logging.getLogger("vwaudit.tests.injected")
    log.setLevel(logging.DEBUG)
    dispatcher = MethodDispatcher(log=log)
    dispatcher.register("echo", _echo)

    with capture_logs(log) as capture:
        dispatcher.dispatch(VWRequest(id="q1", method="echo"))

    assert capture.search("[Background] Received message: VW_REQ id: q1 method: echo")


def test_dispatch_inside_running_loop_is_rejected() -> None:
    dispatcher = MethodDispatcher()
    dispatcher.register("echo", _echo)

    async def call_sync() -> None:
        with pytest.raises(RuntimeError, match="await handle"):
            dispatcher.dispatch(VWRequest(id="r1", method="echo"))
        response = await dispatcher.handle(VWRequest(id="r2", method="echo"))
        assert response.success is True

    with warnings.catch_warnings():
        warnings.simplefilter("error", RuntimeWarning)
        asyncio.run(call_sync())
