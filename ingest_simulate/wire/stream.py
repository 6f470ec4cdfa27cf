"""Binary stream primitives for the simulate wire format.

Lengths and counts are unsigned 7-bit varints, strings are a varint byte
length followed by UTF-8, booleans are a single ``0``/``1`` byte. Structured
document values use a type byte followed by the payload.
"""

from __future__ import annotations

import math
import struct
from typing import Any, Mapping

from ingest_simulate.common.errors import DecodingError

VINT_MAX = 0xFFFFFFFF
LONG_MIN = -(2**63)
LONG_MAX = 2**63 - 1
# Deepest list or map nesting accepted in a document value.
MAX_DEPTH = 100

TYPE_NULL = 0
TYPE_STRING = 1
TYPE_LONG = 2
TYPE_DOUBLE = 3
TYPE_BOOLEAN = 4
TYPE_LIST = 5
TYPE_MAP = 6

_LONG = struct.Struct(">q")
_DOUBLE = struct.Struct(">d")


class StreamOutput:
    """Append-only in-memory byte buffer."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def write_byte(self, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte out of range: {value}")
        self._buffer.append(value)

    def write_bool(self, value: bool) -> None:
        self._buffer.append(1 if value else 0)

    def write_vint(self, value: int) -> None:
        if value < 0 or value > VINT_MAX:
            raise ValueError(f"vint out of range: {value}")
        while value > 0x7F:
            self._buffer.append((value & 0x7F) | 0x80)
            value >>= 7
        self._buffer.append(value)

    def write_string(self, value: str) -> None:
        raw = value.encode("utf-8")
        self.write_vint(len(raw))
        self._buffer.extend(raw)

    def write_optional_string(self, value: str | None) -> None:
        self.write_bool(value is not None)
        if value is not None:
            self.write_string(value)

    def write_map(self, value: Mapping[str, Any], depth: int = 0) -> None:
        if depth >= MAX_DEPTH:
            raise ValueError(f"value nesting exceeds {MAX_DEPTH} levels")
        self.write_vint(len(value))
        # Sorted keys keep equal mappings byte-identical.
        for key in sorted(value):
            if not isinstance(key, str):
                raise TypeError(f"map keys must be str, got {type(key).__name__}")
            self.write_string(key)
            self.write_generic_value(value[key], depth + 1)

    def write_generic_value(self, value: Any, depth: int = 0) -> None:
        if value is None:
            self.write_byte(TYPE_NULL)
        elif isinstance(value, str):
            self.write_byte(TYPE_STRING)
            self.write_string(value)
        elif isinstance(value, bool):
            self.write_byte(TYPE_BOOLEAN)
            self.write_bool(value)
        elif isinstance(value, int):
            if not LONG_MIN <= value <= LONG_MAX:
                raise ValueError(f"integer does not fit in 64 bits: {value}")
            self.write_byte(TYPE_LONG)
            self._buffer.extend(_LONG.pack(value))
        elif isinstance(value, float):
            if not math.isfinite(value):
                raise ValueError(f"non-finite float is not JSON-compatible: {value}")
            self.write_byte(TYPE_DOUBLE)
            self._buffer.extend(_DOUBLE.pack(value))
        elif isinstance(value, (list, tuple)):
            if depth >= MAX_DEPTH:
                raise ValueError(f"value nesting exceeds {MAX_DEPTH} levels")
            self.write_byte(TYPE_LIST)
            self.write_vint(len(value))
            for item in value:
                self.write_generic_value(item, depth + 1)
        elif isinstance(value, Mapping):
            self.write_byte(TYPE_MAP)
            self.write_map(value, depth)
        else:
            raise TypeError(f"cannot encode value of type {type(value).__name__}")


class StreamInput:
    """Read cursor over an encoded buffer.

    Every read either returns a complete value or raises ``DecodingError``;
    the cursor never yields partial data.
    """

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = memoryview(bytes(data))
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def ensure_exhausted(self) -> None:
        if self.remaining:
            raise DecodingError(f"{self.remaining} unexpected trailing bytes at offset {self._pos}")

    def _take(self, size: int) -> memoryview:
        if size > self.remaining:
            raise DecodingError(
                f"truncated input: need {size} bytes at offset {self._pos}, {self.remaining} left"
            )
        chunk = self._data[self._pos : self._pos + size]
        self._pos += size
        return chunk

    def read_byte(self) -> int:
        return self._take(1)[0]

    def read_bool(self) -> bool:
        value = self.read_byte()
        if value not in (0, 1):
            raise DecodingError(f"invalid boolean byte {value:#04x} at offset {self._pos - 1}")
        return value == 1

    def read_vint(self) -> int:
        result = 0
        for shift in range(0, 35, 7):
            byte = self.read_byte()
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                if result > VINT_MAX:
                    raise DecodingError(f"vint overflow at offset {self._pos}")
                return result
        raise DecodingError(f"vint longer than 5 bytes at offset {self._pos}")

    def read_count(self, min_item_size: int = 1) -> int:
        """Read a sequence length and check the buffer can still hold it."""
        count = self.read_vint()
        if count * min_item_size > self.remaining:
            raise DecodingError(
                f"declared {count} entries but only {self.remaining} bytes remain at offset {self._pos}"
            )
        return count

    def read_string(self) -> str:
        size = self.read_vint()
        raw = self._take(size)
        try:
            return str(raw, "utf-8")
        except UnicodeDecodeError as exc:
            raise DecodingError(f"invalid UTF-8 string ending at offset {self._pos}") from exc

    def read_optional_string(self) -> str | None:
        if self.read_bool():
            return self.read_string()
        return None

    def read_map(self, depth: int = 0) -> dict[str, Any]:
        if depth >= MAX_DEPTH:
            raise DecodingError(f"value nesting exceeds {MAX_DEPTH} levels at offset {self._pos}")
        # Each entry is at least a one-byte key length and a one-byte type.
        count = self.read_count(min_item_size=2)
        out: dict[str, Any] = {}
        for _ in range(count):
            key = self.read_string()
            if key in out:
                raise DecodingError(f"duplicate map key {key!r} at offset {self._pos}")
            out[key] = self.read_generic_value(depth + 1)
        return out

    def read_generic_value(self, depth: int = 0) -> Any:
        type_byte = self.read_byte()
        if type_byte == TYPE_NULL:
            return None
        if type_byte == TYPE_STRING:
            return self.read_string()
        if type_byte == TYPE_BOOLEAN:
            return self.read_bool()
        if type_byte == TYPE_LONG:
            return _LONG.unpack(self._take(_LONG.size))[0]
        if type_byte == TYPE_DOUBLE:
            return _DOUBLE.unpack(self._take(_DOUBLE.size))[0]
        if type_byte == TYPE_LIST:
            if depth >= MAX_DEPTH:
                raise DecodingError(f"value nesting exceeds {MAX_DEPTH} levels at offset {self._pos}")
            count = self.read_count()
            return [self.read_generic_value(depth + 1) for _ in range(count)]
        if type_byte == TYPE_MAP:
            return self.read_map(depth)
        raise DecodingError(f"unknown value type {type_byte:#04x} at offset {self._pos - 1}")

