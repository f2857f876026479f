"""Carrier directory: US carrier keys to email-to-SMS gateway domains.

Sending an email to ``<10-digit number><domain>`` makes the carrier deliver
it as a text message, e.g. ``8327080194@vtext.com`` for Verizon.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .errors import UnsupportedCarrierError

DEFAULT_GATEWAY_DOMAINS: Mapping[str, str] = MappingProxyType(
    {
        "att": "@txt.att.net",
        "verizon": "@vtext.com",
        "tmobile": "@tmomail.net",
        "sprint": "@messaging.sprintpcs.com",
        "boost": "@myboostmobile.com",
        "cricket": "@mms.cricketwireless.net",
        "metro": "@mymetropcs.com",
        "uscellular": "@email.uscc.net",
        "virgin": "@vmobl.com",
        "googlefi": "@msg.fi.google.com",
    }
)


@dataclass(frozen=True, slots=True)
class CarrierEntry:
    """One row of the directory."""

    carrier_key: str
    gateway_domain: str


def clean_phone_number(phone_number: str) -> str:
    """Drop every non-digit character."""
    return re.sub(r"\D", "", phone_number or "")


def _normalize_key(carrier: str) -> str:
    return (carrier or "").strip().lower()


def _normalize_domain(domain: str) -> str:
    domain = domain.strip()
    return domain if domain.startswith("@") else f"@{domain}"


class CarrierDirectory:
    """Read-only lookup table; safe to share between concurrent sends."""

    def __init__(self, domains: Mapping[str, str] = DEFAULT_GATEWAY_DOMAINS) -> None:
        table = {_normalize_key(k): _normalize_domain(v) for k, v in domains.items()}
        self._domains: Mapping[str, str] = MappingProxyType(table)

    def __contains__(self, carrier: object) -> bool:
        return isinstance(carrier, str) and _normalize_key(carrier) in self._domains

    def __len__(self) -> int:
        return len(self._domains)

    def domain_for(self, carrier: str) -> str:
        """Return the gateway domain for ``carrier`` (case-insensitive)."""
        try:
            return self._domains[_normalize_key(carrier)]
        except KeyError:
            raise UnsupportedCarrierError(carrier) from None

    def resolve(self, phone_number: str, carrier: str) -> str:
        """Build the gateway email address for a phone number."""
        domain = self.domain_for(carrier)
        return f"{clean_phone_number(phone_number)}{domain}"

    def supported_carriers(self) -> list[str]:
        return list(self._domains)

    def entries(self) -> list[CarrierEntry]:
        return [CarrierEntry(carrier_key=k, gateway_domain=v) for k, v in self._domains.items()]

    def with_overrides(self, extra: Mapping[str, str]) -> CarrierDirectory:
        """Return a new directory with ``extra`` added or replacing entries."""
        merged = dict(self._domains)
        merged.update({_normalize_key(k): _normalize_domain(v) for k, v in extra.items()})
        return CarrierDirectory(merged)

    def listing(self) -> list[dict[str, Any]]:
        """Shape served by ``GET /api/carriers``."""
        return [{"name": k.upper(), "value": k, "domain": v} for k, v in self._domains.items()]


def parse_carrier_overrides(raw: str | None) -> dict[str, str]:
    """Parse ``key=@domain,key2=domain2`` into a mapping.

    Raises:
        ValueError: if an item has no ``=`` or an empty side.
    """
    if not raw or not raw.strip():
        return {}

    result: dict[str, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, domain = item.partition("=")
        if not sep or not key.strip() or not domain.strip():
            raise ValueError(f"Invalid carrier override: {item!r}")
        result[_normalize_key(key)] = _normalize_domain(domain)
    return result


DEFAULT_DIRECTORY = CarrierDirectory()


def resolve_gateway_address(phone_number: str, carrier_name: str) -> str:
    """Return ``<digits-only number><gateway domain>`` for the default table.

    Raises:
        UnsupportedCarrierError: if ``carrier_name`` is not a known carrier.
    """
    return DEFAULT_DIRECTORY.resolve(phone_number, carrier_name)


def supported_carriers() -> list[str]:
    return DEFAULT_DIRECTORY.supported_carriers()


def carrier_listing() -> list[dict[str, Any]]:
    return DEFAULT_DIRECTORY.listing()
