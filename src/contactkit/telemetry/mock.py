"""Mock telemetry provider that keeps everything for test assertions."""

from __future__ import annotations

from typing import Any

from contactkit.telemetry.base import Attr, Span, SpanKind
from contactkit.telemetry.recording import RecordingTelemetryProvider


class MockTelemetryProvider(RecordingTelemetryProvider):
    """Records finished spans and metrics in lists.

    Example::

        telemetry = MockTelemetryProvider()
        resolver = IdentityResolver(store, telemetry=telemetry)
        await resolver.resolve(reference, oracle, tenant_id=1)
        assert telemetry.resolutions() == [("created", "succeeded")]
    """

    def __init__(self) -> None:
        super().__init__()
        self.spans: list[Span] = []
        self.metrics: list[dict[str, Any]] = []

    @property
    def name(self) -> str:
        return "mock"

    def finished(self, span: Span) -> None:
        self.spans.append(span)

    def get_spans(self, kind: SpanKind) -> list[Span]:
        return [s for s in self.spans if s.kind == kind]

    def resolutions(self) -> list[tuple[str | None, str | None]]:
        """(path, outcome) of every finished resolution, in order."""
        return [
            (s.attributes.get(Attr.RESOLVE_PATH), s.attributes.get(Attr.RESOLVE_OUTCOME))
            for s in self.get_spans(SpanKind.RESOLVE)
        ]

    def record_metric(
        self,
        name: str,
        value: float,
        *,
        unit: str = "",
        attributes: dict[str, Any] | None = None,
    ) -> None:
        self.metrics.append(
            {"name": name, "value": value, "unit": unit, "attributes": dict(attributes or {})}
        )

    def metric_total(self, name: str) -> float:
        return sum(m["value"] for m in self.metrics if m["name"] == name)

    def reset(self) -> None:
        super().reset()
        self.spans.clear()
        self.metrics.clear()
