"""Console telemetry provider: one log line per finished operation."""

from __future__ import annotations

import logging
from typing import Any

from contactkit.telemetry.base import Attr, Span, SpanKind
from contactkit.telemetry.recording import RecordingTelemetryProvider

logger = logging.getLogger("contactkit.telemetry")

# (label, attribute key) pairs rendered for each well-known span kind
_FIELDS: dict[SpanKind, tuple[tuple[str, str], ...]] = {
    SpanKind.RESOLVE: (
        ("kind", Attr.RESOLVE_ADDRESS_KIND),
        ("contact", Attr.CONTACT_ID),
        ("path", Attr.RESOLVE_PATH),
        ("outcome", Attr.RESOLVE_OUTCOME),
        ("reasons", Attr.RESOLVE_REASONS),
        ("mapped", Attr.RESOLVE_MAPPING_CREATED),
        ("merges", Attr.RESOLVE_MERGES),
    ),
    SpanKind.ORACLE_CHECK: (
        ("exists", Attr.ORACLE_EXISTS),
        ("canonical", Attr.ORACLE_CANONICAL),
    ),
    SpanKind.MERGE: (
        ("into", Attr.CONTACT_ID),
        ("loser", Attr.MERGE_LOSER_ID),
        ("messages", Attr.MERGE_MESSAGES_MOVED),
        ("tickets_closed", Attr.MERGE_TICKETS_CLOSED),
        ("tickets_moved", Attr.MERGE_TICKETS_MOVED),
    ),
}


class ConsoleTelemetryProvider(RecordingTelemetryProvider):
    """Logs each finished resolution, oracle check and merge as a
    ``key=value`` line on the ``contactkit.telemetry`` logger::

        contact.resolve tenant=1 kind=phone contact=7 path=phone_existing
            outcome=degraded reasons=mapping_write_failed mapped=False merges=1 (2.1ms)
        contact.merge tenant=1 into=7 loser=9 messages=3 tickets_closed=1 tickets_moved=2 (0.4ms)

    Failed operations log at WARNING with the error message.  Metrics log
    at DEBUG.

    Example::

        logging.basicConfig(level=logging.INFO)
        resolver = IdentityResolver(store, telemetry=ConsoleTelemetryProvider())
    """

    def __init__(self, *, level: int = logging.INFO) -> None:
        super().__init__()
        self._level = level

    @property
    def name(self) -> str:
        return "console"

    def finished(self, span: Span) -> None:
        line = render_span(span)
        duration = span.duration_ms or 0.0
        if span.status == "error":
            logger.warning(
                "%s failed after %.1fms: %s", line, duration, span.error_message or "unknown"
            )
        else:
            logger.log(self._level, "%s (%.1fms)", line, duration)

    def record_metric(
        self,
        name: str,
        value: float,
        *,
        unit: str = "",
        attributes: dict[str, Any] | None = None,
    ) -> None:
        extra = "".join(f" {k}={_fmt(v)}" for k, v in (attributes or {}).items())
        logger.debug("metric %s=%g%s%s", name, value, unit, extra)

    def close(self) -> None:
        if self._open:
            logger.warning("Telemetry closed with %d unfinished spans", len(self._open))
        self.reset()


def render_span(span: Span) -> str:
    """Format *span* as ``<kind> tenant=<id> key=value ...``."""
    parts = [str(span.kind)]
    if span.tenant_id is not None:
        parts.append(f"tenant={span.tenant_id}")
    fields = _FIELDS.get(span.kind)
    if fields is None:
        parts.append(span.name)
        parts.extend(f"{k}={_fmt(v)}" for k, v in span.attributes.items())
    else:
        parts.extend(
            f"{label}={_fmt(span.attributes[key])}"
            for label, key in fields
            if key in span.attributes
        )
    return " ".join(parts)


def _fmt(value: Any) -> str:
    if isinstance(value, list | tuple):
        return ",".join(str(v) for v in value) or "-"
    return str(value)
