"""Identity resolver configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from contactkit.core.address import GROUP_SUFFIX, LID_SUFFIX


class ResolverConfig(BaseModel):
    """Settings for ``IdentityResolver``.

    Attributes:
        group_suffix: Marks group addresses (``@g.us``).
        lid_suffix: Marks linked-identifier addresses (``@lid``).
        default_profile_pic_url: Used when the transport has no picture.
            ``None`` keeps whatever the contact already has.
        lock_scope: ``"tenant"`` serializes resolutions per tenant;
            ``"global"`` serializes every resolution in the process.
        max_locks: Idle per-tenant locks kept before LRU eviction.
    """

    group_suffix: str = Field(default=GROUP_SUFFIX, min_length=1)
    lid_suffix: str = Field(default=LID_SUFFIX, min_length=1)
    default_profile_pic_url: str | None = None
    lock_scope: Literal["tenant", "global"] = "tenant"
    max_locks: int = Field(default=1024, ge=1)
