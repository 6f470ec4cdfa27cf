"""Serializable description of a failed document or processor."""

from __future__ import annotations

from dataclasses import dataclass

from ingest_simulate.common.errors import InvalidFailureDescriptor
from ingest_simulate.wire.stream import StreamInput, StreamOutput


@dataclass(frozen=True)
class FailureDescriptor:
    """Error category and message, detached from any exception class.

    Decoding never recreates the original exception type; two descriptors are
    equal when their ``kind`` and ``message`` are equal.
    """

    kind: str
    message: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.kind, str) or not self.kind.strip():
            raise InvalidFailureDescriptor(f"failure kind must be a non-empty string, got {self.kind!r}")
        if not isinstance(self.message, str):
            raise InvalidFailureDescriptor(f"failure message must be a string, got {type(self.message).__name__}")

    @classmethod
    def from_exception(cls, exc: BaseException) -> "FailureDescriptor":
        return cls(kind=type(exc).__name__, message=str(exc))

    def write_to(self, out: StreamOutput) -> None:
        out.write_string(self.kind)
        out.write_string(self.message)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "FailureDescriptor":
        kind = inp.read_string()
        message = inp.read_string()
        # Wire data is taken as-is; domain rules are checked only when built in memory.
        descriptor = object.__new__(cls)
        object.__setattr__(descriptor, "kind", kind)
        object.__setattr__(descriptor, "message", message)
        return descriptor
