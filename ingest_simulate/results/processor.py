"""Outcome of a single processor for a single document."""

from __future__ import annotations

from dataclasses import dataclass

from ingest_simulate.common.errors import InvalidResultError
from ingest_simulate.results.document import IngestDocument
from ingest_simulate.results.failure import FailureDescriptor
from ingest_simulate.results.outcome import read_outcome, require_exactly_one, write_outcome
from ingest_simulate.wire.stream import StreamInput, StreamOutput


@dataclass(frozen=True)
class ProcessorResult:
    """Document snapshot or failure recorded after one processor ran.

    Build with :meth:`success` or :meth:`failed`.
    """

    processor_tag: str
    document: IngestDocument | None = None
    failure: FailureDescriptor | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.processor_tag, str):
            raise InvalidResultError("processor_tag must be str")
        require_exactly_one(self.document, self.failure, f"processor result {self.processor_tag!r}")

    @classmethod
    def success(cls, processor_tag: str, document: IngestDocument) -> "ProcessorResult":
        return cls(processor_tag=processor_tag, document=document)

    @classmethod
    def failed(cls, processor_tag: str, failure: FailureDescriptor) -> "ProcessorResult":
        return cls(processor_tag=processor_tag, failure=failure)

    @property
    def is_failure(self) -> bool:
        return self.failure is not None

    def write_to(self, out: StreamOutput) -> None:
        out.write_string(self.processor_tag)
        write_outcome(out, self.document, self.failure)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "ProcessorResult":
        processor_tag = inp.read_string()
        document, failure = read_outcome(inp)
        return cls(processor_tag=processor_tag, document=document, failure=failure)
