"""Telemetry provider system for contactkit."""

from contactkit.telemetry.base import Attr, Span, SpanKind, TelemetryProvider
from contactkit.telemetry.console import ConsoleTelemetryProvider
from contactkit.telemetry.mock import MockTelemetryProvider
from contactkit.telemetry.noop import NoopTelemetryProvider
from contactkit.telemetry.recording import RecordingTelemetryProvider

__all__ = [
    "Attr",
    "ConsoleTelemetryProvider",
    "MockTelemetryProvider",
    "NoopTelemetryProvider",
    "RecordingTelemetryProvider",
    "Span",
    "SpanKind",
    "TelemetryProvider",
]
