"""Shared span bookkeeping for providers that keep spans in memory."""

from __future__ import annotations

from abc import abstractmethod
from datetime import UTC, datetime
from typing import Any

from contactkit.telemetry.base import Span, SpanKind, TelemetryProvider


class RecordingTelemetryProvider(TelemetryProvider):
    """Holds open spans by id and hands each one to :meth:`finished` on end.

    Ending an unknown or already-ended span id is ignored, as is setting
    an attribute on one.
    """

    def __init__(self) -> None:
        self._open: dict[str, Span] = {}

    def get_active_spans(self) -> list[Span]:
        """Spans that have been started but not ended."""
        return list(self._open.values())

    def start_span(
        self,
        kind: SpanKind,
        name: str,
        *,
        parent_id: str | None = None,
        attributes: dict[str, Any] | None = None,
        tenant_id: int | None = None,
    ) -> str:
        span = Span(
            kind=kind,
            name=name,
            parent_id=parent_id,
            attributes=dict(attributes or {}),
            tenant_id=tenant_id,
        )
        self._open[span.id] = span
        return span.id

    def end_span(
        self,
        span_id: str,
        *,
        status: str = "ok",
        error_message: str | None = None,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        span = self._open.pop(span_id, None)
        if span is None:
            return
        span.end_time = datetime.now(UTC)
        span.status = status
        span.error_message = error_message
        span.attributes.update(attributes or {})
        self.finished(span)

    def set_attribute(self, span_id: str, key: str, value: Any) -> None:
        if span_id in self._open:
            self._open[span_id].attributes[key] = value

    @abstractmethod
    def finished(self, span: Span) -> None:
        """Receive a span that has just ended."""
        ...

    def reset(self) -> None:
        self._open.clear()
