"""Address classification and normalization.

Transport addresses have the layout ``<local>@<domain>``:

- ``5511999@s.whatsapp.net`` -- a phone address; normalized to ``5511999``.
- ``abc123@lid`` -- a linked-identifier address; kept whole as its number.
- ``1203630@g.us`` -- a group address; normalized to its local part.

The domain-stripped form of any address is the text before the first
``@``.  Addresses without an ``@`` are already stripped.  Legacy contacts
may store a linked identifier in stripped form (``abc123``), which is why
lookups try both forms.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from contactkit.models.enums import AddressKind

GROUP_SUFFIX = "@g.us"
LID_SUFFIX = "@lid"

_NON_DIGITS = re.compile(r"\D")


def strip_domain(address: str) -> str:
    """Return *address* without its ``@domain`` suffix."""
    local, _, _ = address.partition("@")
    return local


def classify(
    address: str,
    *,
    group_suffix: str = GROUP_SUFFIX,
    lid_suffix: str = LID_SUFFIX,
) -> AddressKind:
    """Classify *address* as group, linked-identifier, or phone."""
    if group_suffix in address:
        return AddressKind.GROUP
    if lid_suffix in address:
        return AddressKind.LINKED_ID
    return AddressKind.PHONE


def lid_forms(lid: str) -> list[str]:
    """Return the exact and domain-stripped forms of a linked identifier."""
    stripped = strip_domain(lid)
    if stripped == lid:
        return [lid]
    return [lid, stripped]


@dataclass(frozen=True)
class ContactAddress:
    """A classified transport address."""

    raw: str
    kind: AddressKind

    @classmethod
    def parse(
        cls,
        address: str,
        *,
        group_suffix: str = GROUP_SUFFIX,
        lid_suffix: str = LID_SUFFIX,
    ) -> ContactAddress:
        return cls(
            raw=address,
            kind=classify(address, group_suffix=group_suffix, lid_suffix=lid_suffix),
        )

    @property
    def is_group(self) -> bool:
        return self.kind == AddressKind.GROUP

    @property
    def is_lid(self) -> bool:
        return self.kind == AddressKind.LINKED_ID

    @property
    def number(self) -> str:
        """Directory key: the full address for LIDs, the local part otherwise."""
        if self.is_lid:
            return self.raw
        return strip_domain(self.raw)

    @property
    def stripped(self) -> str:
        return strip_domain(self.raw)

    def default_name(self) -> str:
        """Fallback display name: the address with every non-digit removed."""
        return _NON_DIGITS.sub("", self.raw)
