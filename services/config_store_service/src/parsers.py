"""
Value parsers turning raw snapshot strings into typed values.

Every parser is a pure function of (snapshot, key, default). None of them raise:
malformed input is logged and replaced with the caller's default, or for the
pattern parsers, the offending element is dropped.
"""

import re
from datetime import timedelta
from typing import List, Mapping, Optional

from shared.common_utils.logger import logger
from .schemas import PatternGroup

LONG_MIN, LONG_MAX = -(2 ** 63), 2 ** 63 - 1
INT_MIN, INT_MAX = -(2 ** 31), 2 ** 31 - 1

_INTEGER = re.compile(r"[+-]?\d+")
_DURATION = re.compile(r"(?P<amount>[+-]?\d+)\s*(?P<unit>ms|s|m|h|d)?", re.IGNORECASE)
_DURATION_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
}

PATTERN_GROUP_FORMAT = "<regex>: <label>[, <regex>: <label>]"


def parse_string(snapshot: Mapping[str, str], key: str, default: Optional[str] = None) -> Optional[str]:
    return snapshot.get(key, default)


def parse_boolean(snapshot: Mapping[str, str], key: str, default: bool) -> bool:
    """
    Only a case-insensitive "true" is True. The default applies to absent keys;
    any other present value is False.
    """
    value = snapshot.get(key)
    if value is None:
        return default
    return value.lower() == "true"


def parse_long(snapshot: Mapping[str, str], key: str, default: int) -> int:
    return _parse_integer(snapshot, key, default, LONG_MIN, LONG_MAX)


def parse_int(snapshot: Mapping[str, str], key: str, default: int) -> int:
    return _parse_integer(snapshot, key, default, INT_MIN, INT_MAX)


def _parse_integer(snapshot: Mapping[str, str], key: str, default: int, lower: int, upper: int) -> int:
    value = snapshot.get(key)
    if value is None:
        return default

    stripped = value.strip()
    if not _INTEGER.fullmatch(stripped):
        logger.error(f"Could not parse '{key}' as an integer: '{value}'. Using default {default}")
        return default

    try:
        number = int(stripped)
    except ValueError as e:
        # Digit strings beyond the interpreter's int conversion limit
        logger.error(f"Could not parse '{key}' as an integer: {e}. Using default {default}")
        return default

    if not lower <= number <= upper:
        logger.error(f"Value of '{key}' is out of range [{lower}, {upper}]: {number}. Using default {default}")
        return default
    return number


def parse_duration(snapshot: Mapping[str, str], key: str, default: timedelta) -> timedelta:
    """Parses "<amount>[ms|s|m|h|d]"; a bare amount is in seconds."""
    value = snapshot.get(key)
    if value is None:
        return default

    match = _DURATION.fullmatch(value.strip())
    if not match:
        logger.error(f"Could not parse '{key}' as a duration: '{value}'. Using default {default}")
        return default

    unit = (match.group("unit") or "s").lower()
    try:
        return int(match.group("amount")) * _DURATION_UNITS[unit]
    except (OverflowError, ValueError):
        logger.error(f"Duration of '{key}' is out of range: '{value}'. Using default {default}")
        return default


def split_string_list(raw: Optional[str], lowercase: bool = False) -> List[str]:
    if not raw:
        return []

    items = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        items.append(item.lower() if lowercase else item)
    return items


def parse_string_list(
    snapshot: Mapping[str, str], key: str, default: Optional[str] = "", lowercase: bool = False
) -> List[str]:
    """Comma-separated list; the default is a raw string parsed the same way."""
    return split_string_list(snapshot.get(key, default), lowercase=lowercase)


def parse_pattern_list(snapshot: Mapping[str, str], key: str, default: Optional[str] = "") -> List[re.Pattern]:
    patterns = []
    for pattern_string in parse_string_list(snapshot, key, default):
        try:
            patterns.append(re.compile(pattern_string))
        except re.error as e:
            logger.error(f"Error while compiling pattern '{pattern_string}' of '{key}': {e}")
    return patterns


def parse_pattern_groups(snapshot: Mapping[str, str], key: str, default: Optional[str] = "") -> List[PatternGroup]:
    """
    Parses "regex: label" groups in input order.

    A group without a colon, regex or label makes the whole value malformed and
    yields an empty list. A well formed group whose regex does not compile is
    dropped on its own.
    """
    raw = snapshot.get(key, default)
    if not raw or not raw.strip():
        return []

    pairs = []
    for group in raw.split(","):
        group = group.strip()
        if not group:
            continue
        regex, separator, label = group.partition(":")
        regex, label = regex.strip(), label.strip()
        if not separator or not regex or not label:
            logger.error(
                f"Error while parsing pattern map '{key}'. Expected format {PATTERN_GROUP_FORMAT}. "
                f"Actual value: {raw}"
            )
            return []
        pairs.append((regex, label))

    groups = []
    for regex, label in pairs:
        try:
            groups.append(PatternGroup(re.compile(regex), label))
        except re.error as e:
            logger.error(f"Error while compiling pattern '{regex}' of '{key}', dropping group '{label}': {e}")
    return groups


def resolve_label(groups: List[PatternGroup], value: str) -> Optional[str]:
    """Returns the label of the first group whose pattern matches value."""
    for group in groups:
        if group.pattern.search(value):
            return group.label
    return None
