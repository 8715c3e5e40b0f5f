"""
Parser for the flat ``key=value`` properties format.

Supports ``#``/``!`` comment lines, ``=``, ``:`` or whitespace separators,
backslash line continuations and the usual escapes (``\\t``, ``\\n``,
``\\r``, ``\\f``, ``\\uXXXX`` and escaped separators).
"""

import re
import string
from typing import Dict, Iterator, Tuple

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


class PropertiesSyntaxError(ValueError):
    def __init__(self, message: str, line_number: int):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parses properties text into a dict. Later duplicates of a key win.
    Raises PropertiesSyntaxError on a malformed unicode escape.
    """
    properties: Dict[str, str] = {}
    for line_number, line in _logical_lines(text):
        raw_key, raw_value = _split_key_value(line)
        properties[_unescape(raw_key, line_number)] = _unescape(raw_value, line_number)
    return properties


def _logical_lines(text: str) -> Iterator[Tuple[int, str]]:
    buffer = None
    start = 0
    for line_number, natural_line in enumerate(_LINE_BREAK.split(text), start=1):
        line = natural_line.lstrip(_WHITESPACE)
        if buffer is None:
            if not line or line[0] in "#!":
                continue
            start = line_number
            buffer = ""

        # An odd run of trailing backslashes continues the line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            buffer += line[:-1]
            continue

        yield start, buffer + line
        buffer = None

    if buffer:
        yield start, buffer


def _split_key_value(line: str) -> Tuple[str, str]:
    index = 0
    escaped = False
    while index < len(line):
        char = line[index]
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in _SEPARATORS or char in _WHITESPACE:
            break
        index += 1

    rest = line[index:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return line[:index], rest


def _unescape(text: str, line_number: int) -> str:
    if "\\" not in text:
        return text

    chars = []
    index = 0
    while index < len(text):
        char = text[index]
        if char != "\\":
            chars.append(char)
            index += 1
            continue

        index += 1
        if index >= len(text):
            break
        char = text[index]
        if char == "u":
            digits = text[index + 1:index + 5]
            if len(digits) != 4 or not all(digit in string.hexdigits for digit in digits):
                raise PropertiesSyntaxError(f"malformed \\uxxxx escape '\\u{digits}'", line_number)
            chars.append(chr(int(digits, 16)))
            index += 5
        else:
            chars.append(_ESCAPES.get(char, char))
            index += 1
    return "".join(chars)
