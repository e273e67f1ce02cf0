"""HTTP address oracle — asks a WhatsApp gateway whether numbers exist."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from contactkit.core.errors import OracleUnavailableError
from contactkit.models.resolution import ExistenceResult
from contactkit.oracle.base import AddressOracle
from contactkit.oracle.config import HTTPOracleConfig

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger("contactkit.oracle.http")


class HTTPAddressOracle(AddressOracle):
    """Address oracle backed by a gateway's REST number-check endpoint.

    The gateway answers ``POST check_path`` with a JSON list of
    ``{"exists": bool, "jid": str, "lid": str | None}`` entries, one per
    queried number.  The ``lid`` field, when present, is the canonical
    alternate address; older gateways only return ``jid``.
    """

    def __init__(self, config: HTTPOracleConfig) -> None:
        try:
            import httpx as _httpx
        except ImportError as exc:
            raise ImportError(
                "httpx is required for HTTPAddressOracle. Install it with: pip install httpx"
            ) from exc
        self._config = config
        self._httpx = _httpx
        self._client: httpx.AsyncClient = _httpx.AsyncClient(
            timeout=config.timeout,
            headers=self._build_headers(),
        )

    @property
    def name(self) -> str:
        return "http"

    def _build_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._config.api_key is not None:
            headers["Authorization"] = f"Bearer {self._config.api_key.get_secret_value()}"
        return headers

    async def check_existence(self, address: str) -> ExistenceResult:
        try:
            resp = await self._client.post(self._config.check_url, json={"numbers": [address]})
            resp.raise_for_status()
            data: Any = resp.json()
        except self._httpx.TimeoutException as exc:
            raise OracleUnavailableError("timeout") from exc
        except self._httpx.HTTPStatusError as exc:
            raise OracleUnavailableError(f"http_{exc.response.status_code}") from exc
        except (self._httpx.HTTPError, ValueError) as exc:
            raise OracleUnavailableError(str(exc)) from exc

        result = self._parse_check(data)
        logger.debug(
            "Checked %s: exists=%s canonical=%s",
            address,
            result.exists,
            result.canonical_address,
        )
        return result

    @staticmethod
    def _parse_check(data: Any) -> ExistenceResult:
        if isinstance(data, dict):
            data = data.get("results", [])
        if not isinstance(data, list):
            raise OracleUnavailableError(f"unexpected response type: {type(data).__name__}")
        if not data:
            return ExistenceResult(exists=False)
        entry = data[0]
        if not isinstance(entry, dict) or "exists" not in entry:
            raise OracleUnavailableError("malformed check entry")
        if not entry["exists"]:
            return ExistenceResult(exists=False)
        canonical = entry.get("lid") or entry.get("jid")
        return ExistenceResult(exists=True, canonical_address=canonical or None)

    async def profile_picture_url(self, address: str) -> str | None:
        try:
            resp = await self._client.get(self._config.picture_url, params={"address": address})
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            data: dict[str, Any] = resp.json()
        except (self._httpx.HTTPError, ValueError) as exc:
            raise OracleUnavailableError(str(exc)) from exc
        url = data.get("profilePictureUrl")
        return str(url) if url else None

    async def close(self) -> None:
        await self._client.aclose()
