"""JSON encoding and decoding backed by msgspec."""

from typing import Any, Union

import msgspec

__all__ = ("decode_json", "encode_json")

_ENCODER = msgspec.json.Encoder(enc_hook=str)
_DECODER = msgspec.json.Decoder()


def encode_json(data: Any, *, as_bytes: bool = False) -> "Union[str, bytes]":
    """Encode ``data`` to JSON.

    Values msgspec cannot encode natively fall back to ``str()``.

    Args:
        data: Data to encode.
        as_bytes: Return ``bytes`` instead of ``str``.

    Returns:
        The JSON document.
    """
    encoded = _ENCODER.encode(data)
    if as_bytes:
        return encoded
    return encoded.decode("utf-8")


def decode_json(data: "Union[str, bytes]") -> Any:
    """Decode a JSON document."""
    return _DECODER.decode(data)
