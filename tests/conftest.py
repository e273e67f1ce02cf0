"""Shared test fixtures and helpers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

import pytest

from contactkit.core.resolver import IdentityResolver
from contactkit.models.contact import Contact, Message, Ticket
from contactkit.models.enums import TicketStatus
from contactkit.oracle.mock import MockAddressOracle
from contactkit.store.memory import InMemoryContactStore
from contactkit.telemetry.mock import MockTelemetryProvider

TENANT = 1


@pytest.fixture
def advance() -> Callable[[int], Coroutine[Any, Any, None]]:
    """Yield control to let pending tasks run without real delay.

        await advance()       # 5 yields (default)
        await advance(10)     # 10 yields for heavier workloads
    """

    async def _advance(n: int = 5) -> None:
        for _ in range(n):
            await asyncio.sleep(0)

    return _advance


@pytest.fixture
def store() -> InMemoryContactStore:
    return InMemoryContactStore()


@pytest.fixture
def oracle() -> MockAddressOracle:
    return MockAddressOracle()


@pytest.fixture
def telemetry() -> MockTelemetryProvider:
    return MockTelemetryProvider()


@pytest.fixture
def resolver(store: InMemoryContactStore, telemetry: MockTelemetryProvider) -> IdentityResolver:
    return IdentityResolver(store, telemetry=telemetry)


async def make_contact(
    store: InMemoryContactStore,
    number: str,
    name: str = "",
    tenant_id: int = TENANT,
    **kwargs: Any,
) -> Contact:
    return await store.create_contact(
        Contact(tenant_id=tenant_id, name=name or number, number=number, **kwargs)
    )


async def add_messages(
    store: InMemoryContactStore, contact: Contact, count: int = 1
) -> list[Message]:
    return [
        await store.add_message(
            Message(tenant_id=contact.tenant_id, contact_id=contact.id, body=f"msg {i}")
        )
        for i in range(count)
    ]


async def add_ticket(
    store: InMemoryContactStore,
    contact: Contact,
    status: TicketStatus = TicketStatus.OPEN,
) -> Ticket:
    return await store.add_ticket(
        Ticket(tenant_id=contact.tenant_id, contact_id=contact.id, status=status)
    )
