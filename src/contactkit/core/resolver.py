"""Resolve inbound contact references to one canonical directory record."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from contactkit.contacts.base import ContactWriter
from contactkit.contacts.store import StoreContactWriter
from contactkit.core.address import ContactAddress, classify
from contactkit.core.config import ResolverConfig
from contactkit.core.directory import DirectoryLookup
from contactkit.core.errors import OracleUnavailableError
from contactkit.core.locks import GlobalLockManager, InMemoryLockManager, ResolutionLockManager
from contactkit.core.mapping import MappingStore
from contactkit.core.merge import MergeEngine
from contactkit.models.contact import Contact, ContactData, ContactRecord
from contactkit.models.enums import (
    AddressKind,
    DegradedReason,
    ResolutionOutcome,
    ResolutionPath,
)
from contactkit.models.resolution import (
    ExistenceResult,
    InboundReference,
    MergeReport,
    ResolutionResult,
)
from contactkit.oracle.base import AddressOracle
from contactkit.store.base import ContactStore
from contactkit.telemetry.base import Attr, SpanKind, TelemetryProvider
from contactkit.telemetry.noop import NoopTelemetryProvider
from contactkit.tickets.base import TicketTransitioner
from contactkit.tickets.store import StoreTicketTransitioner

logger = logging.getLogger("contactkit.resolver")

# Reasons that mean the resolution completed without something it wanted.
# ORACLE_NOT_FOUND is a definitive answer, not a degradation.
_DEGRADING = frozenset(
    {
        DegradedReason.ORACLE_UNAVAILABLE,
        DegradedReason.MAPPING_WRITE_FAILED,
        DegradedReason.PROFILE_PICTURE_UNAVAILABLE,
    }
)

_UNSET: Any = object()


@dataclass
class _Attempt:
    """Per-call state threaded through one resolution."""

    reference: InboundReference
    address: ContactAddress
    session: AddressOracle
    tenant_id: int
    span_id: str
    reasons: list[DegradedReason] = field(default_factory=list)
    profile_pic_url: Any = _UNSET

    def note(self, reason: DegradedReason) -> None:
        if reason not in self.reasons:
            self.reasons.append(reason)


class IdentityResolver:
    """Maps inbound references to exactly one contact per real-world entity.

    The transport addresses one person two ways: a phone address
    (``5511999@s.whatsapp.net``) and an anonymized linked identifier
    (``abc123@lid``).  The resolver reconciles them, merging a duplicate
    contact created under the other address space when the transport
    confirms both belong to the same entity.

    Non-group resolutions run under an exclusive lock (per tenant by
    default), so two references for the same new entity can never both
    create a contact.  Group references bypass the lock.

    Oracle and mapping-write failures degrade the result but never fail
    it.  Merge failures and data-integrity errors propagate.

    Example::

        resolver = IdentityResolver(InMemoryContactStore())
        contact = await resolver.resolve(
            InboundReference(address="5511999@s.whatsapp.net", display_name="Ana"),
            session=oracle,
            tenant_id=1,
        )
    """

    def __init__(
        self,
        store: ContactStore,
        *,
        contact_writer: ContactWriter | None = None,
        ticket_transitioner: TicketTransitioner | None = None,
        lock_manager: ResolutionLockManager | None = None,
        config: ResolverConfig | None = None,
        telemetry: TelemetryProvider | None = None,
    ) -> None:
        self._config = config or ResolverConfig()
        self._telemetry = telemetry or NoopTelemetryProvider()
        self._mappings = MappingStore(store)
        self._directory = DirectoryLookup(store, self._mappings)
        self._writer = contact_writer or StoreContactWriter(store)
        self._merge = MergeEngine(
            store,
            ticket_transitioner or StoreTicketTransitioner(store),
            directory=self._directory,
            telemetry=self._telemetry,
        )
        self._locks = lock_manager or self._default_lock_manager()

    def _default_lock_manager(self) -> ResolutionLockManager:
        if self._config.lock_scope == "global":
            return GlobalLockManager()
        return InMemoryLockManager(max_locks=self._config.max_locks)

    @property
    def directory(self) -> DirectoryLookup:
        return self._directory

    @property
    def mappings(self) -> MappingStore:
        return self._mappings

    @property
    def merge_engine(self) -> MergeEngine:
        return self._merge

    # ── Public API ───────────────────────────────────────────────

    async def resolve(
        self,
        reference: InboundReference,
        session: AddressOracle,
        tenant_id: int,
    ) -> Contact:
        """Return the canonical contact for *reference*, creating it if needed."""
        result = await self.resolve_reference(reference, session, tenant_id)
        return result.contact

    async def resolve_reference(
        self,
        reference: InboundReference,
        session: AddressOracle,
        tenant_id: int,
    ) -> ResolutionResult:
        """Resolve *reference* and report how the contact was reached.

        Raises:
            DataIntegrityError: A mapping points at a missing contact.
            ContactKitError: A merge step or contact write failed.
        """
        address = ContactAddress.parse(
            reference.address,
            group_suffix=self._config.group_suffix,
            lid_suffix=self._config.lid_suffix,
        )
        span_id = self._telemetry.start_span(
            SpanKind.RESOLVE,
            "contact.resolve",
            tenant_id=tenant_id,
            attributes={Attr.RESOLVE_ADDRESS_KIND: address.kind.value},
        )
        attempt = _Attempt(
            reference=reference,
            address=address,
            session=session,
            tenant_id=tenant_id,
            span_id=span_id,
        )
        try:
            if address.is_group:
                result = await self._resolve_group(attempt)
            else:
                async with self._locks.locked(tenant_id):
                    result = await self._resolve_individual(attempt)
        except Exception as exc:
            self._telemetry.end_span(span_id, status="error", error_message=str(exc))
            raise

        self._telemetry.end_span(
            span_id,
            attributes={
                Attr.CONTACT_ID: result.contact.id,
                Attr.RESOLVE_PATH: result.path.value,
                Attr.RESOLVE_OUTCOME: result.outcome.value,
                Attr.RESOLVE_REASONS: [r.value for r in result.reasons],
                Attr.RESOLVE_MAPPING_CREATED: result.mapping_created,
                Attr.RESOLVE_MERGES: len(result.merges),
            },
        )
        logger.debug(
            "Resolved %s to contact %s via %s (%s)",
            reference.address,
            result.contact.id,
            result.path,
            result.outcome,
            extra={"tenant_id": tenant_id, "contact_id": result.contact.id},
        )
        return result

    # ── Branches ─────────────────────────────────────────────────

    async def _resolve_group(self, attempt: _Attempt) -> ResolutionResult:
        contact = await self._writer.upsert(await self._contact_data(attempt))
        return self._result(attempt, contact, ResolutionPath.GROUP)

    async def _resolve_individual(self, attempt: _Attempt) -> ResolutionResult:
        address = attempt.address
        found = await self._directory.by_number(attempt.tenant_id, address.number)

        if address.is_lid:
            return await self._resolve_lid(attempt, found)
        if found is not None:
            return await self._resolve_known_phone(attempt, found)
        return await self._resolve_new_phone(attempt)

    async def _resolve_lid(self, attempt: _Attempt, found: ContactRecord | None) -> ResolutionResult:
        lid = attempt.address.raw
        if found is not None:
            contact = await self._refresh(attempt, found.contact)
            return self._result(attempt, contact, ResolutionPath.LID_EXACT)

        mapped = await self._directory.by_mapped_lid(attempt.tenant_id, lid)
        if mapped is not None:
            contact = await self._refresh(attempt, mapped.contact)
            return self._result(attempt, contact, ResolutionPath.LID_MAPPED)

        partial = await self._directory.by_partial_lid(attempt.tenant_id, lid)
        if partial is not None:
            # Legacy row stored the bare identifier; upgrade it to the full address
            contact = await self._refresh(attempt, partial, number=attempt.address.number)
            return self._result(attempt, contact, ResolutionPath.LID_PARTIAL)

        return await self._create(attempt)

    async def _resolve_known_phone(self, attempt: _Attempt, found: ContactRecord) -> ResolutionResult:
        contact = found.contact
        merges: list[MergeReport] = []
        mapping_created = False

        if found.mapping is None:
            existence = await self._check(attempt)
            lid = self._linked_id(existence)
            if lid is not None:
                merges = await self._merge.dedup_and_consolidate(
                    contact, lid, parent_span_id=attempt.span_id
                )
                mapping_created = await self._map(attempt, lid, contact.id)

        contact = await self._refresh(attempt, contact)
        return self._result(
            attempt,
            contact,
            ResolutionPath.PHONE_EXISTING,
            merges=merges,
            mapping_created=mapping_created,
        )

    async def _resolve_new_phone(self, attempt: _Attempt) -> ResolutionResult:
        existence = await self._check(attempt)
        lid = self._linked_id(existence)
        if lid is not None:
            lid_contact = await self._directory.by_lid_any_form(attempt.tenant_id, lid)
            if lid_contact is not None:
                # The entity reached us from the LID side first; adopt that contact
                merges = await self._merge.dedup_and_consolidate(
                    lid_contact, lid, parent_span_id=attempt.span_id
                )
                mapping_created = await self._map(attempt, lid, lid_contact.id)
                contact = await self._refresh(
                    attempt, lid_contact, number=attempt.address.number
                )
                return self._result(
                    attempt,
                    contact,
                    ResolutionPath.PHONE_ADOPTED_LID,
                    merges=merges,
                    mapping_created=mapping_created,
                )
        return await self._create(attempt)

    async def _create(self, attempt: _Attempt) -> ResolutionResult:
        contact = await self._writer.upsert(await self._contact_data(attempt))
        return self._result(attempt, contact, ResolutionPath.CREATED)

    # ── Helpers ──────────────────────────────────────────────────

    async def _check(self, attempt: _Attempt) -> ExistenceResult | None:
        """Ask the transport about the address; ``None`` when it can't say."""
        address = attempt.address.raw
        try:
            with self._telemetry.span(
                SpanKind.ORACLE_CHECK,
                "oracle.check",
                parent_id=attempt.span_id,
                tenant_id=attempt.tenant_id,
            ) as span_id:
                existence = await attempt.session.check_existence(address)
                self._telemetry.set_attribute(span_id, Attr.ORACLE_EXISTS, existence.exists)
                self._telemetry.set_attribute(
                    span_id, Attr.ORACLE_CANONICAL, existence.canonical_address
                )
        except Exception as exc:
            logger.warning(
                "Existence check for %s failed, continuing without it: %s",
                address,
                exc,
                exc_info=not isinstance(exc, OracleUnavailableError),
                extra={"tenant_id": attempt.tenant_id},
            )
            attempt.note(DegradedReason.ORACLE_UNAVAILABLE)
            return None

        if not existence.exists:
            logger.info(
                "%s is not on the transport network; continuing",
                address,
                extra={"tenant_id": attempt.tenant_id},
            )
            attempt.note(DegradedReason.ORACLE_NOT_FOUND)
        return existence

    def _linked_id(self, existence: ExistenceResult | None) -> str | None:
        """The linked identifier in an oracle answer, if it carries one."""
        if existence is None or not existence.exists or not existence.canonical_address:
            return None
        canonical = existence.canonical_address
        kind = classify(
            canonical,
            group_suffix=self._config.group_suffix,
            lid_suffix=self._config.lid_suffix,
        )
        if kind != AddressKind.LINKED_ID:
            return None
        return canonical

    async def _map(self, attempt: _Attempt, lid: str, contact_id: int) -> bool:
        created = await self._mappings.create_safely(attempt.tenant_id, lid, contact_id)
        if not created:
            attempt.note(DegradedReason.MAPPING_WRITE_FAILED)
        return created

    async def _profile_pic(self, attempt: _Attempt) -> str | None:
        """Fetch the profile picture once per resolution, best-effort."""
        if attempt.profile_pic_url is not _UNSET:
            return attempt.profile_pic_url
        url: str | None = None
        try:
            url = await attempt.session.profile_picture_url(attempt.address.raw)
        except Exception as exc:
            logger.warning(
                "Profile picture lookup for %s failed: %s",
                attempt.address.raw,
                exc,
                exc_info=not isinstance(exc, OracleUnavailableError),
                extra={"tenant_id": attempt.tenant_id},
            )
            attempt.note(DegradedReason.PROFILE_PICTURE_UNAVAILABLE)
        attempt.profile_pic_url = url or self._config.default_profile_pic_url
        return attempt.profile_pic_url

    async def _contact_data(self, attempt: _Attempt) -> ContactData:
        address = attempt.address
        return ContactData(
            tenant_id=attempt.tenant_id,
            name=attempt.reference.display_name or address.default_name(),
            number=address.number,
            is_group=address.is_group,
            profile_pic_url=await self._profile_pic(attempt),
        )

    async def _refresh(self, attempt: _Attempt, contact: Contact, **changes: Any) -> Contact:
        """Apply *changes* plus a profile picture refresh; skip no-op writes."""
        url = await self._profile_pic(attempt)
        if url is not None and url != contact.profile_pic_url:
            changes["profile_pic_url"] = url
        changes = {k: v for k, v in changes.items() if getattr(contact, k) != v}
        if not changes:
            return contact
        return await self._writer.update(contact, **changes)

    @staticmethod
    def _result(
        attempt: _Attempt,
        contact: Contact,
        path: ResolutionPath,
        *,
        merges: list[MergeReport] | None = None,
        mapping_created: bool = False,
    ) -> ResolutionResult:
        degraded = any(r in _DEGRADING for r in attempt.reasons)
        return ResolutionResult(
            contact=contact,
            path=path,
            outcome=ResolutionOutcome.DEGRADED if degraded else ResolutionOutcome.SUCCEEDED,
            reasons=list(attempt.reasons),
            merges=merges or [],
            mapping_created=mapping_created,
        )
