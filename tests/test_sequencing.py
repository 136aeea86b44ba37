import asyncio
import threading

import pytest

from budgetsmart.domain.errors import FetchError
from budgetsmart.domain.helpers.sequencing import LatestResultGate, LatestResultGates


def test_only_latest_ticket_is_applied():
    gate = LatestResultGate()
    first = gate.issue()
    second = gate.issue()
    assert second > first
    assert gate.publish(second, "june")
    assert not gate.publish(first, "may")
    assert gate.result == "june"
    assert gate.applied == second


def test_stale_error_is_discarded_and_latest_error_keeps_result():
    gate = LatestResultGate()
    ticket = gate.issue()
    gate.publish(ticket, "june")
    stale = ticket
    newer = gate.issue()
    assert not gate.fail(stale, FetchError("listing budgets"))
    assert gate.error is None
    assert gate.fail(newer, FetchError("listing budgets"))
    assert isinstance(gate.error, FetchError)
    assert gate.result == "june"


def test_run_discards_result_that_completes_late():
    gate = LatestResultGate()
    release = threading.Event()

    def slow():
        release.wait(5)
        return "may"

    def fast():
        return "june"

    async def scenario():
        first = asyncio.create_task(gate.run(slow))
        await asyncio.sleep(0)
        second = await gate.run(fast)
        release.set()
        return await first, second

    stale_applied, fresh_applied = asyncio.run(scenario())
    assert fresh_applied
    assert not stale_applied
    assert gate.result == "june"


def test_run_records_fetch_error():
    gate = LatestResultGate()

    def failing():
        raise FetchError("listing transactions", RuntimeError("offline"))

    assert asyncio.run(gate.run(failing))
    assert "offline" in str(gate.error)
    assert gate.result is None


def test_run_latest_returns_none_for_superseded_request():
    gate = LatestResultGate()
    release = threading.Event()

    def slow():
        release.wait(5)
        return "may"

    async def scenario():
        first = asyncio.create_task(gate.run_latest(slow))
        await asyncio.sleep(0)
        second = await gate.run_latest(lambda: "june")
        release.set()
        return await first, second

    stale, fresh = asyncio.run(scenario())
    assert stale is None
    assert fresh == "june"


def test_run_latest_reraises_fetch_error_of_latest_request():
    gate = LatestResultGate()

    def failing():
        raise FetchError("listing budgets", RuntimeError("offline"))

    with pytest.raises(FetchError):
        asyncio.run(gate.run_latest(failing))


def test_gates_are_kept_per_user():
    gates = LatestResultGates()
    alice = gates.for_key("alice")
    assert gates.for_key("alice") is alice
    bob = gates.for_key("bob")
    alice.issue()
    ticket = bob.issue()
    alice.issue()
    assert bob.is_latest(ticket)
