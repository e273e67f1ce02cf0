"""Inbound reference, oracle answer, and resolution result models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from contactkit.models.contact import Contact
from contactkit.models.enums import DegradedReason, ResolutionOutcome, ResolutionPath


class InboundReference(BaseModel):
    """The sender of an inbound message as reported by the transport."""

    address: str = Field(min_length=1)
    display_name: str | None = None


class ExistenceResult(BaseModel):
    """Answer from an address oracle.

    ``canonical_address`` is the transport's alternate form for the
    address, e.g. the linked identifier (``abc123@lid``) of a phone number.
    """

    exists: bool
    canonical_address: str | None = None


class MergeReport(BaseModel):
    """Summary of a duplicate contact folded into its canonical record."""

    winner_id: int
    loser_id: int
    loser_number: str
    messages_moved: int = 0
    tickets_closed: int = 0
    tickets_moved: int = 0


class ResolutionResult(BaseModel):
    """Structured outcome of resolving one inbound reference."""

    contact: Contact
    path: ResolutionPath
    outcome: ResolutionOutcome = ResolutionOutcome.SUCCEEDED
    reasons: list[DegradedReason] = Field(default_factory=list)
    merges: list[MergeReport] = Field(default_factory=list)
    mapping_created: bool = False

    @property
    def degraded(self) -> bool:
        return self.outcome == ResolutionOutcome.DEGRADED
