"""
Clarity value wire codec.

Read-only contract calls on a Stacks node take their arguments and return
their result as hex-encoded, consensus-serialized Clarity values. This
module serializes the argument types the dashboard sends and decodes any
result into the ``{type, value}`` JSON shape the Stacks JS SDK's
``cvToJSON`` produces, which is what the dashboard client consumes.
"""
import hashlib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

# Type prefixes
INT = 0x00
UINT = 0x01
BUFFER = 0x02
BOOL_TRUE = 0x03
BOOL_FALSE = 0x04
PRINCIPAL_STANDARD = 0x05
PRINCIPAL_CONTRACT = 0x06
RESPONSE_OK = 0x07
RESPONSE_ERR = 0x08
OPTIONAL_NONE = 0x09
OPTIONAL_SOME = 0x0A
LIST = 0x0B
TUPLE = 0x0C
STRING_ASCII = 0x0D
STRING_UTF8 = 0x0E

C32_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"

MAX_U128 = (1 << 128) - 1
MIN_I128 = -(1 << 127)
MAX_I128 = (1 << 127) - 1


class ClarityDecodeError(ValueError):
    """Raised when bytes do not form a valid Clarity value."""


@dataclass
class ClarityValue:
    type_id: int
    value: Any = None
    # Nested values for optional/response/list; ordered (name, value) pairs for tuples
    children: List[Any] = field(default_factory=list)


# ==================
# Serialization
# ==================

def serialize_uint(value: int) -> str:
    """Hex (no 0x prefix) of a serialized Clarity ``uint``."""
    if value < 0 or value > MAX_U128:
        raise ValueError(f"uint out of range: {value}")
    return (bytes([UINT]) + value.to_bytes(16, "big")).hex()


def serialize_int(value: int) -> str:
    if value < MIN_I128 or value > MAX_I128:
        raise ValueError(f"int out of range: {value}")
    return (bytes([INT]) + value.to_bytes(16, "big", signed=True)).hex()


# ==================
# c32check addresses
# ==================

def c32_encode(data: bytes) -> str:
    """Crockford-style base32 of ``data``, one leading '0' per leading zero byte."""
    number = int.from_bytes(data, "big")
    digits = []
    while number:
        number, remainder = divmod(number, 32)
        digits.append(C32_ALPHABET[remainder])
    leading_zero_bytes = len(data) - len(data.lstrip(b"\x00"))
    return C32_ALPHABET[0] * leading_zero_bytes + "".join(reversed(digits))


def c32_address(version: int, hash160: bytes) -> str:
    checksum = hashlib.sha256(hashlib.sha256(bytes([version]) + hash160).digest()).digest()[:4]
    return "S" + C32_ALPHABET[version] + c32_encode(hash160 + checksum)


# ==================
# Deserialization
# ==================

class _Reader:
    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise ClarityDecodeError(
                f"Unexpected end of data at offset {self.offset} (wanted {size} bytes)"
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def byte(self) -> int:
        return self.take(1)[0]

    def u32(self) -> int:
        return int.from_bytes(self.take(4), "big")


def _read_principal(reader: _Reader) -> str:
    version = reader.byte()
    if version >= len(C32_ALPHABET):
        raise ClarityDecodeError(f"Invalid address version {version}")
    return c32_address(version, reader.take(20))


def _read_value(reader: _Reader) -> ClarityValue:
    type_id = reader.byte()

    if type_id == INT:
        return ClarityValue(type_id, int.from_bytes(reader.take(16), "big", signed=True))
    if type_id == UINT:
        return ClarityValue(type_id, int.from_bytes(reader.take(16), "big"))
    if type_id == BUFFER:
        return ClarityValue(type_id, reader.take(reader.u32()))
    if type_id == BOOL_TRUE:
        return ClarityValue(type_id, True)
    if type_id == BOOL_FALSE:
        return ClarityValue(type_id, False)
    if type_id == PRINCIPAL_STANDARD:
        return ClarityValue(type_id, _read_principal(reader))
    if type_id == PRINCIPAL_CONTRACT:
        address = _read_principal(reader)
        name = reader.take(reader.byte()).decode("ascii")
        return ClarityValue(type_id, f"{address}.{name}")
    if type_id in (RESPONSE_OK, RESPONSE_ERR, OPTIONAL_SOME):
        return ClarityValue(type_id, children=[_read_value(reader)])
    if type_id == OPTIONAL_NONE:
        return ClarityValue(type_id)
    if type_id == LIST:
        count = reader.u32()
        return ClarityValue(type_id, children=[_read_value(reader) for _ in range(count)])
    if type_id == TUPLE:
        count = reader.u32()
        entries: List[Tuple[str, ClarityValue]] = []
        for _ in range(count):
            name = reader.take(reader.byte()).decode("ascii")
            entries.append((name, _read_value(reader)))
        return ClarityValue(type_id, children=entries)
    if type_id == STRING_ASCII:
        raw = reader.take(reader.u32())
        return ClarityValue(type_id, raw.decode("ascii"), children=[len(raw)])
    if type_id == STRING_UTF8:
        raw = reader.take(reader.u32())
        return ClarityValue(type_id, raw.decode("utf-8"), children=[len(raw)])

    raise ClarityDecodeError(f"Unknown Clarity type prefix 0x{type_id:02x}")


def deserialize(hex_value: str) -> ClarityValue:
    """Decode a hex string (with or without ``0x``) into a ClarityValue."""
    if hex_value.startswith("0x"):
        hex_value = hex_value[2:]
    try:
        data = bytes.fromhex(hex_value)
    except ValueError as e:
        raise ClarityDecodeError(f"Invalid hex: {e}") from e

    reader = _Reader(data)
    try:
        value = _read_value(reader)
    except UnicodeDecodeError as e:
        raise ClarityDecodeError(f"Invalid string payload: {e}") from e
    if reader.offset != len(data):
        raise ClarityDecodeError(f"{len(data) - reader.offset} trailing bytes after value")
    return value


# ==================
# JSON conversion
# ==================

def type_string(cv: ClarityValue) -> str:
    """Clarity type signature as printed by the Stacks JS SDK."""
    t = cv.type_id
    if t in (BOOL_TRUE, BOOL_FALSE):
        return "bool"
    if t == INT:
        return "int"
    if t == UINT:
        return "uint"
    if t == BUFFER:
        return f"(buff {len(cv.value)})"
    if t == OPTIONAL_NONE:
        return "(optional none)"
    if t == OPTIONAL_SOME:
        return f"(optional {type_string(cv.children[0])})"
    if t == RESPONSE_ERR:
        return f"(response UnknownType {type_string(cv.children[0])})"
    if t == RESPONSE_OK:
        return f"(response {type_string(cv.children[0])} UnknownType)"
    if t in (PRINCIPAL_STANDARD, PRINCIPAL_CONTRACT):
        return "principal"
    if t == LIST:
        inner = type_string(cv.children[0]) if cv.children else "UnknownType"
        return f"(list {len(cv.children)} {inner})"
    if t == TUPLE:
        fields = " ".join(f"({name} {type_string(value)})" for name, value in cv.children)
        return f"(tuple {fields})"
    if t == STRING_ASCII:
        return f"(string-ascii {cv.children[0]})"
    if t == STRING_UTF8:
        return f"(string-utf8 {cv.children[0]})"
    raise ClarityDecodeError(f"Unknown Clarity type id {t}")


def _plain_value(cv: ClarityValue) -> Any:
    t = cv.type_id
    if t in (INT, UINT):
        return str(cv.value)
    if t == BUFFER:
        return "0x" + cv.value.hex()
    if t == OPTIONAL_NONE:
        return None
    if t in (OPTIONAL_SOME, RESPONSE_OK, RESPONSE_ERR):
        return cv_to_json(cv.children[0])
    if t == LIST:
        return [cv_to_json(item) for item in cv.children]
    if t == TUPLE:
        return {name: cv_to_json(value) for name, value in cv.children}
    return cv.value


def cv_to_json(cv: ClarityValue) -> Dict[str, Any]:
    """``{type, value}`` JSON form; responses also carry ``success``."""
    result: Dict[str, Any] = {"type": type_string(cv), "value": _plain_value(cv)}
    if cv.type_id == RESPONSE_OK:
        result["success"] = True
    elif cv.type_id == RESPONSE_ERR:
        result["success"] = False
    return result


def decode_to_json(hex_value: str) -> Dict[str, Any]:
    return cv_to_json(deserialize(hex_value))


def uint_argument(value: int) -> str:
    """A ``uint`` function argument in the ``0x``-prefixed form the node expects."""
    return "0x" + serialize_uint(value)
