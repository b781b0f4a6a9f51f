"""Core protocol helpers."""

from __future__ import annotations

from ccannounce.core.bencode import BencodeDecodeError, BencodeDecoder, decode

__all__ = ["BencodeDecodeError", "BencodeDecoder", "decode"]
