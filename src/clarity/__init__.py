from .codec import (
    ClarityDecodeError,
    ClarityValue,
    cv_to_json,
    decode_to_json,
    deserialize,
    serialize_uint,
    uint_argument,
)

__all__ = [
    "ClarityDecodeError",
    "ClarityValue",
    "cv_to_json",
    "decode_to_json",
    "deserialize",
    "serialize_uint",
    "uint_argument",
]
