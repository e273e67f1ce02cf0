"""Abstract base class for transport address oracles."""

from __future__ import annotations

from abc import ABC, abstractmethod

from contactkit.models.resolution import ExistenceResult


class AddressOracle(ABC):
    """A transport session's view of which addresses exist.

    Resolution treats the oracle as unreliable: any exception raised by
    ``check_existence`` or ``profile_picture_url`` is caught and the
    resolution continues without the answer.
    """

    @property
    def name(self) -> str:
        """Oracle name (e.g. 'http', 'mock')."""
        return self.__class__.__name__

    @abstractmethod
    async def check_existence(self, address: str) -> ExistenceResult:
        """Ask the transport whether *address* exists.

        Args:
            address: Full transport address, e.g. ``5511999@s.whatsapp.net``.

        Returns:
            Whether the address exists and, if known, its canonical
            alternate form (usually the linked identifier).

        Raises:
            OracleUnavailableError: The transport could not answer.
        """
        ...

    async def profile_picture_url(self, address: str) -> str | None:
        """Return the address's current profile picture URL, if available."""
        return None

    async def close(self) -> None:  # noqa: B027
        """Release resources. Override in subclasses that hold connections."""
