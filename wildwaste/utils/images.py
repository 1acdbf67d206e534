"""Base64 image payloads as carried in the `image_base64` wire field."""

import base64
import binascii
import sys


def encode_image(data: bytes | None) -> str | None:
    """Encode raw image bytes for the wire. None stays None."""
    if data is None:
        return None
    return base64.b64encode(data).decode("ascii")


def decode_image(payload: str | None, report_id: int | None = None) -> bytes | None:
    """Decode a wire image payload.

    Accepts standard base64 with embedded line breaks (the Android encoder
    wraps at 76 columns). Returns None for a missing, blank or undecodable
    payload; undecodable payloads are reported on stderr.
    """
    if payload is None or not payload.strip():
        return None
    compact = "".join(payload.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        print(
            f"[WildWaste] Warning: dropping undecodable image on report {report_id}: {exc}",
            file=sys.stderr,
        )
        return None
