"""HTTP address oracle configuration."""

from __future__ import annotations

from pydantic import BaseModel, SecretStr


class HTTPOracleConfig(BaseModel):
    """Configuration for a WhatsApp gateway's number-check API.

    ``check_path`` receives ``POST {"numbers": [address]}``;
    ``picture_path`` receives ``GET ?address=...``.
    """

    base_url: str
    api_key: SecretStr | None = None
    timeout: float = 10.0
    check_path: str = "/contacts/check"
    picture_path: str = "/contacts/profile-picture"

    @property
    def check_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.check_path}"

    @property
    def picture_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.picture_path}"
