"""Unit tests for the in-process customer store and keyed locks"""

import asyncio
import pytest
from risk_gateway.domain.exceptions import NotFoundError
from risk_gateway.domain.models import CustomerStatus
from risk_gateway.infrastructure.store import InMemoryCustomerStore
from risk_gateway.utils.locks import KeyedLock


def test_store_update_replaces_profile(store: InMemoryCustomerStore, medium_risk_profile):
    updated = store.update("CUST-001", CustomerStatus.APPROVED, "documents verified")

    assert updated.status == CustomerStatus.APPROVED
    assert updated.credit_score == medium_risk_profile.credit_score
    assert medium_risk_profile.status == CustomerStatus.REVIEW  # original untouched
    assert store.get("CUST-001") == updated

    notes = store.notes_for("CUST-001")
    assert len(notes) == 1
    assert notes[0].notes == "documents verified"


def test_store_list_returns_all(store: InMemoryCustomerStore):
    assert sorted(c.customer_id for c in store.list()) == ["CUST-001", "CUST-002", "CUST-003"]


def test_store_unknown_customer(store: InMemoryCustomerStore):
    with pytest.raises(NotFoundError):
        store.update("NOPE", CustomerStatus.APPROVED)
    with pytest.raises(NotFoundError):
        store.get("NOPE")


async def test_keyed_lock_excludes_same_key():
    lock = KeyedLock()
    events = []

    async def worker(name: str):
        async with lock.hold("CUST-1"):
            events.append(f"{name}-in")
            await asyncio.sleep(0.01)
            events.append(f"{name}-out")

    await asyncio.gather(worker("a"), worker("b"))

    assert events == ["a-in", "a-out", "b-in", "b-out"]
    assert len(lock) == 0


async def test_keyed_lock_allows_different_keys():
    lock = KeyedLock()
    entered = asyncio.Event()

    async with lock.hold("CUST-1"):
        assert lock.locked("CUST-1")
        assert not lock.locked("CUST-2")

        async def other():
            async with lock.hold("CUST-2"):
                entered.set()

        await asyncio.wait_for(other(), timeout=1.0)

    assert entered.is_set()
    assert len(lock) == 0


async def test_keyed_lock_released_on_error():
    lock = KeyedLock()

    with pytest.raises(RuntimeError):
        async with lock.hold("CUST-1"):
            raise RuntimeError("boom")

    assert not lock.locked("CUST-1")
    assert len(lock) == 0
