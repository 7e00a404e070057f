"""Built-in format attributes."""

from __future__ import annotations

import ipaddress
import re
from datetime import date, datetime
from typing import Any
from urllib.parse import urlsplit

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATE_TIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+\-]\d{2}:\d{2})$"
)
_STRING_ONLY = frozenset({"string"})


class EmailAttribute:
    supported_types = _STRING_ONLY

    def is_valid(self, value: Any) -> bool:
        return _EMAIL_RE.match(value) is not None


class DateAttribute:
    supported_types = _STRING_ONLY

    def is_valid(self, value: Any) -> bool:
        if _DATE_RE.match(value) is None:
            return False
        try:
            date.fromisoformat(value)
        except ValueError:
            return False
        return True


class DateTimeAttribute:
    """RFC 3339 date-time; fractional seconds and offsets are optional parts."""

    supported_types = _STRING_ONLY

    def is_valid(self, value: Any) -> bool:
        if _DATE_TIME_RE.match(value) is None:
            return False
        normalized = value[:10] + "T" + value[11:]
        if normalized[-1] in "Zz":
            normalized = normalized[:-1] + "+00:00"
        seconds_end = 19
        if len(normalized) > seconds_end and normalized[seconds_end] == ".":
            offset_start = normalized.find("+", seconds_end)
            if offset_start == -1:
                offset_start = normalized.find("-", seconds_end)
            normalized = normalized[:seconds_end] + normalized[offset_start:]
        try:
            datetime.fromisoformat(normalized)
        except ValueError:
            return False
        return True


class Ipv4Attribute:
    supported_types = _STRING_ONLY

    def is_valid(self, value: Any) -> bool:
        try:
            ipaddress.IPv4Address(value)
        except ValueError:
            return False
        return True


class Ipv6Attribute:
    supported_types = _STRING_ONLY

    def is_valid(self, value: Any) -> bool:
        try:
            ipaddress.IPv6Address(value)
        except ValueError:
            return False
        return True


class UriAttribute:
    """Absolute URI: a scheme is required."""

    supported_types = _STRING_ONLY

    def is_valid(self, value: Any) -> bool:
        if any(char.isspace() for char in value):
            return False
        try:
            parts = urlsplit(value)
        except ValueError:
            return False
        return bool(parts.scheme) and bool(parts.netloc or parts.path)


class RegexAttribute:
    supported_types = _STRING_ONLY

    def is_valid(self, value: Any) -> bool:
        try:
            re.compile(value)
        except re.error:
            return False
        return True


DEFAULT_FORMAT_ATTRIBUTES: dict[str, Any] = {
    "date": DateAttribute(),
    "date-time": DateTimeAttribute(),
    "email": EmailAttribute(),
    "ipv4": Ipv4Attribute(),
    "ipv6": Ipv6Attribute(),
    "regex": RegexAttribute(),
    "uri": UriAttribute(),
}
