"""Mock address oracle for testing."""

from __future__ import annotations

import asyncio

from contactkit.core.errors import OracleUnavailableError
from contactkit.models.resolution import ExistenceResult
from contactkit.oracle.base import AddressOracle


class MockAddressOracle(AddressOracle):
    """Answers from a pre-configured mapping and records every call.

    - Address in ``answers`` -> that result.
    - Address in ``failures`` -> raises ``OracleUnavailableError``.
    - Otherwise -> ``exists=False``.

    ``delay`` makes every check suspend, so tests can interleave
    concurrent resolutions.
    """

    def __init__(
        self,
        answers: dict[str, ExistenceResult] | None = None,
        failures: set[str] | None = None,
        pictures: dict[str, str] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.answers = answers or {}
        self.failures = failures or set()
        self.pictures = pictures or {}
        self.delay = delay
        self.calls: list[str] = []

    def set_lid(self, address: str, lid: str) -> None:
        """Report *address* as existing with linked identifier *lid*."""
        self.answers[address] = ExistenceResult(exists=True, canonical_address=lid)

    async def check_existence(self, address: str) -> ExistenceResult:
        self.calls.append(address)
        if self.delay:
            await asyncio.sleep(self.delay)
        if address in self.failures:
            raise OracleUnavailableError(f"mock failure for {address}")
        return self.answers.get(address, ExistenceResult(exists=False))

    async def profile_picture_url(self, address: str) -> str | None:
        return self.pictures.get(address)
