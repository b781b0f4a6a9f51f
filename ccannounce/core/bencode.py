"""Bencode decoding for tracker responses.

Tracker announce responses are bencoded dictionaries. Byte strings are kept
as ``bytes`` and dictionary keys are ``bytes`` as well.
"""

from __future__ import annotations

from typing import Any

from ccannounce.utils.exceptions import BencodeError

# Nesting limit for lists and dicts, well below the interpreter recursion limit
MAX_DEPTH = 256


class BencodeDecodeError(BencodeError):
    """Raised when bencoded data is malformed."""


class BencodeDecoder:
    """Decoder for bencoded data."""

    def __init__(self, data: bytes):
        """Initialize decoder with the bytes to decode."""
        self.data = data
        self.pos = 0
        self.depth = 0

    def decode(self) -> Any:
        """Decode one top-level value, rejecting trailing data."""
        value = self._decode_next()
        if self.pos != len(self.data):
            msg = f"Trailing data after position {self.pos}"
            raise BencodeDecodeError(msg)
        return value

    def _peek(self) -> bytes:
        if self.pos >= len(self.data):
            msg = "Unexpected end of data"
            raise BencodeDecodeError(msg)
        return self.data[self.pos : self.pos + 1]

    def _decode_next(self) -> Any:
        token = self._peek()
        if token == b"i":
            return self._decode_int()
        if token == b"l":
            return self._decode_list()
        if token == b"d":
            return self._decode_dict()
        if token.isdigit():
            return self._decode_bytes()
        msg = f"Invalid token {token!r} at position {self.pos}"
        raise BencodeDecodeError(msg)

    def _decode_int(self) -> int:
        end = self.data.find(b"e", self.pos)
        if end == -1:
            msg = "Unterminated integer"
            raise BencodeDecodeError(msg)
        raw = self.data[self.pos + 1 : end]
        digits = raw[1:] if raw.startswith(b"-") else raw
        # ASCII digits only; i-0e and leading zeros are invalid
        if (
            not digits.isdigit()
            or raw == b"-0"
            or (digits.startswith(b"0") and digits != b"0")
        ):
            msg = f"Invalid integer {raw!r}"
            raise BencodeDecodeError(msg)
        value = int(raw)
        self.pos = end + 1
        return value

    def _decode_bytes(self) -> bytes:
        colon = self.data.find(b":", self.pos)
        if colon == -1:
            msg = "Missing ':' in string length"
            raise BencodeDecodeError(msg)
        raw_len = self.data[self.pos : colon]
        if not raw_len.isdigit():
            msg = f"Invalid string length {raw_len!r}"
            raise BencodeDecodeError(msg)
        length = int(raw_len)
        start = colon + 1
        end = start + length
        if end > len(self.data):
            msg = "String extends past end of data"
            raise BencodeDecodeError(msg)
        self.pos = end
        return self.data[start:end]

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            msg = f"Nesting deeper than {MAX_DEPTH} levels"
            raise BencodeDecodeError(msg)

    def _decode_list(self) -> list[Any]:
        self._enter()
        self.pos += 1
        result = []
        while self._peek() != b"e":
            result.append(self._decode_next())
        self.pos += 1
        self.depth -= 1
        return result

    def _decode_dict(self) -> dict[bytes, Any]:
        self._enter()
        self.pos += 1
        result: dict[bytes, Any] = {}
        while self._peek() != b"e":
            if not self._peek().isdigit():
                msg = f"Dictionary key must be a string at position {self.pos}"
                raise BencodeDecodeError(msg)
            key = self._decode_bytes()
            result[key] = self._decode_next()
        self.pos += 1
        self.depth -= 1
        return result


def decode(data: bytes) -> Any:
    """Decode bencoded ``data``."""
    return BencodeDecoder(data).decode()
