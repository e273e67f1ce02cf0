"""contactkit - Async contact identity resolution for messaging transports."""

from contactkit._version import __version__
from contactkit.contacts import ContactWriter, StoreContactWriter
from contactkit.core.address import ContactAddress, classify, lid_forms, strip_domain
from contactkit.core.config import ResolverConfig
from contactkit.core.directory import DirectoryLookup
from contactkit.core.errors import (
    ContactKitError,
    ContactNotFoundError,
    DataIntegrityError,
    DuplicateContactError,
    MappingConflictError,
    OracleUnavailableError,
    TicketNotFoundError,
)
from contactkit.core.locks import GlobalLockManager, InMemoryLockManager, ResolutionLockManager
from contactkit.core.mapping import MappingStore
from contactkit.core.merge import MergeEngine
from contactkit.core.resolver import IdentityResolver
from contactkit.models import (
    AddressKind,
    Contact,
    ContactData,
    ContactRecord,
    DegradedReason,
    ExistenceResult,
    InboundReference,
    LinkedIdMapping,
    MergeReport,
    Message,
    ResolutionOutcome,
    ResolutionPath,
    ResolutionResult,
    Ticket,
    TicketStatus,
)
from contactkit.oracle import AddressOracle, HTTPAddressOracle, HTTPOracleConfig, MockAddressOracle
from contactkit.store.base import ContactStore
from contactkit.store.memory import InMemoryContactStore
from contactkit.telemetry import (
    Attr,
    ConsoleTelemetryProvider,
    MockTelemetryProvider,
    NoopTelemetryProvider,
    Span,
    SpanKind,
    TelemetryProvider,
)
from contactkit.tickets import StatusChangeCallback, StoreTicketTransitioner, TicketTransitioner

__all__ = [
    "__version__",
    # Resolver
    "IdentityResolver",
    "ResolverConfig",
    "DirectoryLookup",
    "MappingStore",
    "MergeEngine",
    # Addresses
    "ContactAddress",
    "classify",
    "lid_forms",
    "strip_domain",
    # Errors
    "ContactKitError",
    "ContactNotFoundError",
    "DataIntegrityError",
    "DuplicateContactError",
    "MappingConflictError",
    "OracleUnavailableError",
    "TicketNotFoundError",
    # Locks
    "GlobalLockManager",
    "InMemoryLockManager",
    "ResolutionLockManager",
    # Models
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
    # Collaborators
    "ContactWriter",
    "StatusChangeCallback",
    "StoreContactWriter",
    "StoreTicketTransitioner",
    "TicketTransitioner",
    # Oracles
    "AddressOracle",
    "HTTPAddressOracle",
    "HTTPOracleConfig",
    "MockAddressOracle",
    # Store
    "ContactStore",
    "InMemoryContactStore",
    "PostgresContactStore",
    # Telemetry
    "Attr",
    "ConsoleTelemetryProvider",
    "MockTelemetryProvider",
    "NoopTelemetryProvider",
    "Span",
    "SpanKind",
    "TelemetryProvider",
]


def __getattr__(name: str) -> object:
    if name == "PostgresContactStore":
        from contactkit.store.postgres import PostgresContactStore

        return PostgresContactStore
    raise AttributeError(f"module 'contactkit' has no attribute {name}")
