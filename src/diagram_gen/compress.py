"""Deflate + base64 encoding of rendered page XML."""

from __future__ import annotations

import base64
import binascii
import zlib

from diagram_gen.errors import CompressionError


def compress_xml(xml: str) -> str:
    """zlib-compress *xml* and return it base64 encoded."""
    try:
        deflated = zlib.compress(xml.encode("utf-8"))
    except zlib.error as exc:
        raise CompressionError(f"failed to compress page XML: {exc}") from exc
    return base64.b64encode(deflated).decode("ascii")


def decompress_xml(data: str) -> str:
    """Inverse of :func:`compress_xml`."""
    try:
        raw = base64.b64decode(data.strip(), validate=True)
        return zlib.decompress(raw).decode("utf-8")
    except (binascii.Error, zlib.error, UnicodeDecodeError) as exc:
        raise CompressionError(f"failed to decompress page XML: {exc}") from exc
