"""Snapshot of a document as it leaves a pipeline or a single processor."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from ingest_simulate.wire.stream import StreamInput, StreamOutput


def freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return frozenset((key, freeze(item)) for key, item in value.items())
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Plain ``dict``/``list`` copy of a document value, for JSON output."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(item) for item in value]
    return value


@dataclass(frozen=True)
class IngestDocument:
    """Document metadata plus its source and ingest metadata.

    ``source`` and ``ingest`` are deep-copied at construction and exposed as
    read-only mappings, so a snapshot never changes after it is taken.
    """

    index: str
    id: str
    source: Mapping[str, Any]
    type: str | None = None
    ingest: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("index", "id"):
            if not isinstance(getattr(self, name), str):
                raise TypeError(f"{name} must be str")
        if self.type is not None and not isinstance(self.type, str):
            raise TypeError("type must be str or None")
        for name in ("source", "ingest"):
            value = getattr(self, name)
            if not isinstance(value, Mapping):
                raise TypeError(f"{name} must be a mapping")
            object.__setattr__(self, name, MappingProxyType(thaw(value)))

    def __hash__(self) -> int:
        return hash((self.index, self.id, self.type, freeze(self.source), freeze(self.ingest)))

    def write_to(self, out: StreamOutput) -> None:
        out.write_string(self.index)
        out.write_optional_string(self.type)
        out.write_string(self.id)
        out.write_map(self.source)
        out.write_map(self.ingest)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "IngestDocument":
        index = inp.read_string()
        doc_type = inp.read_optional_string()
        doc_id = inp.read_string()
        source = inp.read_map()
        ingest = inp.read_map()
        return cls(index=index, id=doc_id, source=source, type=doc_type, ingest=ingest)
