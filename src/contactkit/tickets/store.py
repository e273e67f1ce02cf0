"""Ticket transitioner backed by a ContactStore."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from contactkit.core.errors import TicketNotFoundError
from contactkit.models.contact import Ticket
from contactkit.models.enums import TicketStatus
from contactkit.store.base import ContactStore
from contactkit.tickets.base import TicketTransitioner

logger = logging.getLogger("contactkit.tickets")

# (ticket after the change, status before the change)
StatusChangeCallback = Callable[[Ticket, TicketStatus], Awaitable[None] | None]


class StoreTicketTransitioner(TicketTransitioner):
    """Persists status changes and notifies an optional callback.

    The callback runs after the change is stored and is awaited before
    ``set_status`` returns; its failures propagate to the caller.
    """

    def __init__(
        self,
        store: ContactStore,
        on_status_change: StatusChangeCallback | None = None,
    ) -> None:
        self._store = store
        self.on_status_change = on_status_change

    async def set_status(self, ticket_id: int, tenant_id: int, status: TicketStatus) -> None:
        ticket = await self._store.get_ticket(tenant_id, ticket_id)
        if ticket is None:
            raise TicketNotFoundError(f"ticket {ticket_id} (tenant {tenant_id})")
        old_status = ticket.status
        if old_status == status:
            return
        updated = await self._store.update_ticket(ticket.model_copy(update={"status": status}))
        logger.debug("Ticket %s: %s -> %s", ticket_id, old_status, status)
        if self.on_status_change is not None:
            result = self.on_status_change(updated, old_status)
            if asyncio.iscoroutine(result):
                await result
