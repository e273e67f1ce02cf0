"""All string enums for contactkit."""

from __future__ import annotations

from enum import StrEnum, unique


@unique
class AddressKind(StrEnum):
    PHONE = "phone"
    LINKED_ID = "linked_id"
    GROUP = "group"


@unique
class TicketStatus(StrEnum):
    OPEN = "open"
    PENDING = "pending"
    CLOSED = "closed"


@unique
class ResolutionOutcome(StrEnum):
    SUCCEEDED = "succeeded"
    DEGRADED = "degraded"


@unique
class ResolutionPath(StrEnum):
    """Which branch of the resolution procedure produced the contact."""

    GROUP = "group"
    LID_EXACT = "lid_exact"
    LID_MAPPED = "lid_mapped"
    LID_PARTIAL = "lid_partial"
    PHONE_EXISTING = "phone_existing"
    PHONE_ADOPTED_LID = "phone_adopted_lid"
    CREATED = "created"


@unique
class DegradedReason(StrEnum):
    ORACLE_UNAVAILABLE = "oracle_unavailable"
    ORACLE_NOT_FOUND = "oracle_not_found"
    MAPPING_WRITE_FAILED = "mapping_write_failed"
    PROFILE_PICTURE_UNAVAILABLE = "profile_picture_unavailable"
