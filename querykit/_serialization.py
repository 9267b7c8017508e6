from typing import Any

import msgspec

__all__ = ("encode_json",)


def _enc_hook(value: Any) -> Any:
    """Fallback for values msgspec can't encode natively (log extras carry arbitrary parameters)."""
    return repr(value)


_JSON_ENCODER = msgspec.json.Encoder(enc_hook=_enc_hook, decimal_format="string", uuid_format="canonical")


def encode_json(data: Any) -> str:
    """Encode data to a JSON string."""
    return _JSON_ENCODER.encode(data).decode("utf-8")
