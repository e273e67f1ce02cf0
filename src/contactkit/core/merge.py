"""Fold duplicate contacts into their canonical record."""

from __future__ import annotations

import logging

from contactkit.core.directory import DirectoryLookup
from contactkit.models.contact import Contact
from contactkit.models.enums import TicketStatus
from contactkit.models.resolution import MergeReport
from contactkit.store.base import ContactStore
from contactkit.telemetry.base import Attr, SpanKind, TelemetryProvider
from contactkit.telemetry.noop import NoopTelemetryProvider
from contactkit.tickets.base import TicketTransitioner

logger = logging.getLogger("contactkit.merge")


class MergeEngine:
    """Merges a duplicate (loser) contact into a canonical (winner) contact.

    Steps run in a fixed order and are not caught here: a failure stops
    the merge at that step and propagates to the caller.  Wrap the call
    in a store transaction where the backend offers one.

    1. Move the loser's messages to the winner.
    2. Close the loser's open tickets one at a time through the
       ticket transitioner, so each close's side effects complete before
       the next begins.
    3. Move the loser's tickets (now all closed) to the winner.
    4. Delete the loser; its mapping goes with it.
    """

    def __init__(
        self,
        store: ContactStore,
        tickets: TicketTransitioner,
        directory: DirectoryLookup | None = None,
        telemetry: TelemetryProvider | None = None,
    ) -> None:
        self._store = store
        self._tickets = tickets
        self._directory = directory or DirectoryLookup(store)
        self._telemetry = telemetry or NoopTelemetryProvider()

    async def dedup_and_consolidate(
        self,
        winner: Contact,
        lid: str,
        *,
        parent_span_id: str | None = None,
    ) -> list[MergeReport]:
        """Merge every other contact stored under *lid* into *winner*.

        Matches the exact linked identifier and its domain-stripped form,
        so a tenant holding both ``abc123@lid`` and a legacy ``abc123``
        row gets two merges.  Returns an empty list (and changes nothing)
        when there is no such contact, which also makes a repeated call a
        no-op.
        """
        reports: list[MergeReport] = []
        while True:
            loser = await self._directory.by_lid_any_form(
                winner.tenant_id, lid, exclude_id=winner.id
            )
            if loser is None:
                break
            reports.append(await self.merge(winner, loser, parent_span_id=parent_span_id))
        if not reports:
            logger.debug("No duplicate for lid %s (contact %s)", lid, winner.id)
        return reports

    async def merge(
        self,
        winner: Contact,
        loser: Contact,
        *,
        parent_span_id: str | None = None,
    ) -> MergeReport:
        """Fold *loser* into *winner* and delete *loser*."""
        tenant_id = winner.tenant_id
        logger.info(
            "Merging duplicate contact %s (%s) into %s (%s)",
            loser.id,
            loser.number,
            winner.id,
            winner.number,
            extra={"tenant_id": tenant_id, "winner_id": winner.id, "loser_id": loser.id},
        )
        with self._telemetry.span(
            SpanKind.MERGE,
            "contact.merge",
            parent_id=parent_span_id,
            tenant_id=tenant_id,
            attributes={Attr.CONTACT_ID: winner.id, Attr.MERGE_LOSER_ID: loser.id},
        ) as span_id:
            report = MergeReport(winner_id=winner.id, loser_id=loser.id, loser_number=loser.number)

            report.messages_moved = await self._store.reassign_messages(tenant_id, loser.id, winner.id)

            open_tickets = await self._store.list_tickets(tenant_id, loser.id, open_only=True)
            for ticket in open_tickets:
                await self._tickets.set_status(ticket.id, ticket.tenant_id, TicketStatus.CLOSED)
                report.tickets_closed += 1

            report.tickets_moved = await self._store.reassign_tickets(tenant_id, loser.id, winner.id)

            await self._store.delete_contact(loser.id)

            self._telemetry.set_attribute(span_id, Attr.MERGE_MESSAGES_MOVED, report.messages_moved)
            self._telemetry.set_attribute(span_id, Attr.MERGE_TICKETS_CLOSED, report.tickets_closed)
            self._telemetry.set_attribute(span_id, Attr.MERGE_TICKETS_MOVED, report.tickets_moved)

        self._telemetry.record_metric(
            "contactkit.merge.messages_moved",
            float(report.messages_moved),
            attributes={Attr.TENANT_ID: tenant_id},
        )
        return report
