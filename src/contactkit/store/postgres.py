"""PostgreSQL implementation of ContactStore using asyncpg."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from contactkit.core.errors import (
    ContactNotFoundError,
    DataIntegrityError,
    DuplicateContactError,
    MappingConflictError,
    TicketNotFoundError,
)
from contactkit.models.contact import Contact, LinkedIdMapping, Message, Ticket
from contactkit.models.enums import TicketStatus
from contactkit.store.base import ContactStore

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS contacts (
    id BIGSERIAL PRIMARY KEY,
    tenant_id INTEGER NOT NULL,
    number TEXT NOT NULL,
    data JSONB NOT NULL,
    UNIQUE (tenant_id, number)
);

CREATE TABLE IF NOT EXISTS linked_id_mappings (
    tenant_id INTEGER NOT NULL,
    lid TEXT NOT NULL,
    contact_id BIGINT NOT NULL UNIQUE REFERENCES contacts(id) ON DELETE CASCADE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    PRIMARY KEY (tenant_id, lid)
);

CREATE TABLE IF NOT EXISTS messages (
    id BIGSERIAL PRIMARY KEY,
    tenant_id INTEGER NOT NULL,
    contact_id BIGINT NOT NULL REFERENCES contacts(id),
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    data JSONB NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_messages_contact ON messages(tenant_id, contact_id);

CREATE TABLE IF NOT EXISTS tickets (
    id BIGSERIAL PRIMARY KEY,
    tenant_id INTEGER NOT NULL,
    contact_id BIGINT NOT NULL REFERENCES contacts(id),
    status TEXT NOT NULL DEFAULT 'open',
    data JSONB NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_tickets_contact ON tickets(tenant_id, contact_id);
"""


def _dump(model: Any) -> str:
    return str(model.model_dump_json())


def _count(tag: str) -> int:
    """Row count from an asyncpg status tag such as ``UPDATE 3``."""
    return int(tag.rsplit(" ", 1)[-1])


def _contact(row: Any) -> Contact:
    contact = Contact.model_validate_json(row["data"])
    return contact.model_copy(
        update={"id": row["id"], "tenant_id": row["tenant_id"], "number": row["number"]}
    )


def _message(row: Any) -> Message:
    message = Message.model_validate_json(row["data"])
    return message.model_copy(update={"id": row["id"], "contact_id": row["contact_id"]})


def _ticket(row: Any) -> Ticket:
    ticket = Ticket.model_validate_json(row["data"])
    return ticket.model_copy(
        update={
            "id": row["id"],
            "contact_id": row["contact_id"],
            "status": TicketStatus(row["status"]),
        }
    )


def _mapping(row: Any) -> LinkedIdMapping:
    return LinkedIdMapping(
        tenant_id=row["tenant_id"],
        lid=row["lid"],
        contact_id=row["contact_id"],
        created_at=row["created_at"],
    )


class PostgresContactStore(ContactStore):
    """PostgreSQL-backed directory store using asyncpg."""

    def __init__(
        self,
        dsn: str | None = None,
        pool: Any = None,
    ) -> None:
        try:
            import asyncpg as _asyncpg
        except ImportError as exc:
            raise ImportError(
                "asyncpg is required for PostgresContactStore. "
                "Install it with: pip install contactkit[postgres]"
            ) from exc
        self._asyncpg = _asyncpg
        self._dsn = dsn
        self._pool = pool
        self._owns_pool = pool is None

    async def init(self, min_size: int = 2, max_size: int = 10) -> None:
        """Create the connection pool (if needed) and ensure schema exists."""
        if self._pool is None:
            self._pool = await self._asyncpg.create_pool(
                self._dsn,
                min_size=min_size,
                max_size=max_size,
            )
        async with self._pool.acquire() as conn:
            await conn.execute(_SCHEMA)

    async def close(self) -> None:
        """Release the connection pool if we own it."""
        if self._pool is not None and self._owns_pool:
            await self._pool.close()
            self._pool = None

    async def __aenter__(self) -> PostgresContactStore:
        await self.init()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── Contact operations ───────────────────────────────────────

    async def create_contact(self, contact: Contact) -> Contact:
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    "INSERT INTO contacts (tenant_id, number, data) VALUES ($1, $2, $3) "
                    "RETURNING id",
                    contact.tenant_id,
                    contact.number,
                    _dump(contact),
                )
        except self._asyncpg.UniqueViolationError as exc:
            raise DuplicateContactError(
                f"tenant {contact.tenant_id} already has {contact.number!r}"
            ) from exc
        return contact.model_copy(update={"id": row["id"]})

    async def get_contact(self, contact_id: int) -> Contact | None:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT id, tenant_id, number, data FROM contacts WHERE id = $1",
                contact_id,
            )
        return _contact(row) if row is not None else None

    async def find_contact(self, tenant_id: int, number: str) -> Contact | None:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT id, tenant_id, number, data FROM contacts "
                "WHERE tenant_id = $1 AND number = $2",
                tenant_id,
                number,
            )
        return _contact(row) if row is not None else None

    async def find_contact_by_numbers(
        self,
        tenant_id: int,
        numbers: list[str],
        *,
        exclude_id: int | None = None,
    ) -> Contact | None:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT id, tenant_id, number, data FROM contacts "
                "WHERE tenant_id = $1 AND number = ANY($2::text[]) "
                "AND ($3::bigint IS NULL OR id <> $3) "
                "ORDER BY array_position($2::text[], number) LIMIT 1",
                tenant_id,
                numbers,
                exclude_id,
            )
        return _contact(row) if row is not None else None

    async def update_contact(self, contact: Contact) -> Contact:
        stored = contact.model_copy(update={"updated_at": datetime.now(UTC)})
        try:
            async with self._pool.acquire() as conn:
                tag = await conn.execute(
                    "UPDATE contacts SET number = $2, data = $3 WHERE id = $1",
                    stored.id,
                    stored.number,
                    _dump(stored),
                )
        except self._asyncpg.UniqueViolationError as exc:
            raise DuplicateContactError(
                f"tenant {contact.tenant_id} already has {contact.number!r}"
            ) from exc
        if _count(tag) == 0:
            raise ContactNotFoundError(str(contact.id))
        return stored

    async def delete_contact(self, contact_id: int) -> bool:
        try:
            async with self._pool.acquire() as conn:
                tag = await conn.execute("DELETE FROM contacts WHERE id = $1", contact_id)
        except self._asyncpg.ForeignKeyViolationError as exc:
            raise DataIntegrityError(
                f"contact {contact_id} still owns messages or tickets"
            ) from exc
        return bool(tag == "DELETE 1")

    async def list_contacts(self, tenant_id: int) -> list[Contact]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT id, tenant_id, number, data FROM contacts WHERE tenant_id = $1 ORDER BY id",
                tenant_id,
            )
        return [_contact(r) for r in rows]

    # ── Mapping operations ───────────────────────────────────────

    async def add_mapping(self, mapping: LinkedIdMapping) -> LinkedIdMapping:
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    "INSERT INTO linked_id_mappings (tenant_id, lid, contact_id, created_at) "
                    "VALUES ($1, $2, $3, $4)",
                    mapping.tenant_id,
                    mapping.lid,
                    mapping.contact_id,
                    mapping.created_at,
                )
        except self._asyncpg.UniqueViolationError as exc:
            raise MappingConflictError(
                f"lid {mapping.lid!r} or contact {mapping.contact_id} is already mapped"
            ) from exc
        except self._asyncpg.ForeignKeyViolationError as exc:
            raise ContactNotFoundError(str(mapping.contact_id)) from exc
        return mapping

    async def find_mapping(self, tenant_id: int, lid: str) -> LinkedIdMapping | None:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT tenant_id, lid, contact_id, created_at FROM linked_id_mappings "
                "WHERE tenant_id = $1 AND lid = $2",
                tenant_id,
                lid,
            )
        return _mapping(row) if row is not None else None

    async def get_mapping_for_contact(self, contact_id: int) -> LinkedIdMapping | None:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT tenant_id, lid, contact_id, created_at FROM linked_id_mappings "
                "WHERE contact_id = $1",
                contact_id,
            )
        return _mapping(row) if row is not None else None

    async def list_mappings(self, tenant_id: int) -> list[LinkedIdMapping]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT tenant_id, lid, contact_id, created_at FROM linked_id_mappings "
                "WHERE tenant_id = $1",
                tenant_id,
            )
        return [_mapping(r) for r in rows]

    # ── Message operations ───────────────────────────────────────

    async def add_message(self, message: Message) -> Message:
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    "INSERT INTO messages (tenant_id, contact_id, created_at, data) "
                    "VALUES ($1, $2, $3, $4) RETURNING id",
                    message.tenant_id,
                    message.contact_id,
                    message.created_at,
                    _dump(message),
                )
        except self._asyncpg.ForeignKeyViolationError as exc:
            raise ContactNotFoundError(str(message.contact_id)) from exc
        return message.model_copy(update={"id": row["id"]})

    async def list_messages(self, tenant_id: int, contact_id: int) -> list[Message]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT id, contact_id, data FROM messages "
                "WHERE tenant_id = $1 AND contact_id = $2 ORDER BY created_at, id",
                tenant_id,
                contact_id,
            )
        return [_message(r) for r in rows]

    async def reassign_messages(self, tenant_id: int, from_contact_id: int, to_contact_id: int) -> int:
        async with self._pool.acquire() as conn:
            tag = await conn.execute(
                "UPDATE messages SET contact_id = $3 WHERE tenant_id = $1 AND contact_id = $2",
                tenant_id,
                from_contact_id,
                to_contact_id,
            )
        return _count(tag)

    # ── Ticket operations ────────────────────────────────────────

    async def add_ticket(self, ticket: Ticket) -> Ticket:
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    "INSERT INTO tickets (tenant_id, contact_id, status, data) "
                    "VALUES ($1, $2, $3, $4) RETURNING id",
                    ticket.tenant_id,
                    ticket.contact_id,
                    ticket.status.value,
                    _dump(ticket),
                )
        except self._asyncpg.ForeignKeyViolationError as exc:
            raise ContactNotFoundError(str(ticket.contact_id)) from exc
        return ticket.model_copy(update={"id": row["id"]})

    async def get_ticket(self, tenant_id: int, ticket_id: int) -> Ticket | None:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT id, contact_id, status, data FROM tickets WHERE tenant_id = $1 AND id = $2",
                tenant_id,
                ticket_id,
            )
        return _ticket(row) if row is not None else None

    async def list_tickets(
        self,
        tenant_id: int,
        contact_id: int,
        *,
        open_only: bool = False,
    ) -> list[Ticket]:
        query = (
            "SELECT id, contact_id, status, data FROM tickets "
            "WHERE tenant_id = $1 AND contact_id = $2"
        )
        if open_only:
            query += f" AND status <> '{TicketStatus.CLOSED.value}'"
        query += " ORDER BY id"
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query, tenant_id, contact_id)
        return [_ticket(r) for r in rows]

    async def update_ticket(self, ticket: Ticket) -> Ticket:
        stored = ticket.model_copy(update={"updated_at": datetime.now(UTC)})
        async with self._pool.acquire() as conn:
            tag = await conn.execute(
                "UPDATE tickets SET contact_id = $2, status = $3, data = $4 WHERE id = $1",
                stored.id,
                stored.contact_id,
                stored.status.value,
                _dump(stored),
            )
        if _count(tag) == 0:
            raise TicketNotFoundError(str(ticket.id))
        return stored

    async def reassign_tickets(self, tenant_id: int, from_contact_id: int, to_contact_id: int) -> int:
        async with self._pool.acquire() as conn:
            tag = await conn.execute(
                "UPDATE tickets SET contact_id = $3 WHERE tenant_id = $1 AND contact_id = $2",
                tenant_id,
                from_contact_id,
                to_contact_id,
            )
        return _count(tag)
