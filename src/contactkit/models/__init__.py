"""Pydantic models for contactkit."""

from contactkit.models.contact import (
    Contact,
    ContactData,
    ContactRecord,
    LinkedIdMapping,
    Message,
    Ticket,
)
from contactkit.models.enums import (
    AddressKind,
    DegradedReason,
    ResolutionOutcome,
    ResolutionPath,
    TicketStatus,
)
from contactkit.models.resolution import (
    ExistenceResult,
    InboundReference,
    MergeReport,
    ResolutionResult,
)

__all__ = [
    "AddressKind",
    "Contact",
    "ContactData",
    "ContactRecord",
    "DegradedReason",
    "ExistenceResult",
    "InboundReference",
    "LinkedIdMapping",
    "MergeReport",
    "Message",
    "ResolutionOutcome",
    "ResolutionPath",
    "ResolutionResult",
    "Ticket",
    "TicketStatus",
]
