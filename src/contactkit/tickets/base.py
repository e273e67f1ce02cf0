"""Abstract base class for the ticket-transition collaborator."""

from __future__ import annotations

from abc import ABC, abstractmethod

from contactkit.models.enums import TicketStatus


class TicketTransitioner(ABC):
    """Moves tickets between statuses, with whatever side effects that implies."""

    @abstractmethod
    async def set_status(self, ticket_id: int, tenant_id: int, status: TicketStatus) -> None:
        """Transition a ticket to *status*.

        Raises:
            TicketNotFoundError: The tenant has no such ticket.
        """
        ...
