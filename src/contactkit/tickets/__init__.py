"""Ticket-transition collaborator."""

from contactkit.tickets.base import TicketTransitioner
from contactkit.tickets.store import StatusChangeCallback, StoreTicketTransitioner

__all__ = ["StatusChangeCallback", "StoreTicketTransitioner", "TicketTransitioner"]
