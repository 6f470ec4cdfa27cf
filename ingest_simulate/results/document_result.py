"""Per-document simulate results, in simple and verbose form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, Union

from ingest_simulate.common.errors import InvalidResultError
from ingest_simulate.results.document import IngestDocument
from ingest_simulate.results.failure import FailureDescriptor
from ingest_simulate.results.outcome import read_outcome, require_exactly_one, write_outcome
from ingest_simulate.results.processor import ProcessorResult
from ingest_simulate.wire.stream import StreamInput, StreamOutput


@dataclass(frozen=True)
class SimpleDocumentResult:
    """Final document, or the failure that stopped the pipeline."""

    verbose: ClassVar[bool] = False

    document: IngestDocument | None = None
    failure: FailureDescriptor | None = None

    def __post_init__(self) -> None:
        require_exactly_one(self.document, self.failure, "simple document result")

    @classmethod
    def success(cls, document: IngestDocument) -> "SimpleDocumentResult":
        return cls(document=document)

    @classmethod
    def failed(cls, failure: FailureDescriptor) -> "SimpleDocumentResult":
        return cls(failure=failure)

    @property
    def is_failure(self) -> bool:
        return self.failure is not None

    @property
    def failures(self) -> tuple[FailureDescriptor, ...]:
        return (self.failure,) if self.failure is not None else ()

    def write_to(self, out: StreamOutput) -> None:
        write_outcome(out, self.document, self.failure)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "SimpleDocumentResult":
        document, failure = read_outcome(inp)
        return cls(document=document, failure=failure)


@dataclass(frozen=True)
class VerboseDocumentResult:
    """Processor results for one document, in execution order.

    The sequence as a whole is never marked failed; a document failed when
    any of its processor results did.
    """

    verbose: ClassVar[bool] = True

    processor_results: tuple[ProcessorResult, ...] = ()

    def __init__(self, processor_results: Iterable[ProcessorResult] = ()) -> None:
        results = tuple(processor_results)
        for result in results:
            if not isinstance(result, ProcessorResult):
                raise InvalidResultError(f"expected ProcessorResult, got {type(result).__name__}")
        object.__setattr__(self, "processor_results", results)

    @property
    def is_failure(self) -> bool:
        return any(result.is_failure for result in self.processor_results)

    @property
    def failures(self) -> tuple[FailureDescriptor, ...]:
        return tuple(result.failure for result in self.processor_results if result.failure is not None)

    def write_to(self, out: StreamOutput) -> None:
        out.write_vint(len(self.processor_results))
        for result in self.processor_results:
            result.write_to(out)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "VerboseDocumentResult":
        # A processor result is at least a tag length byte and a discriminant.
        count = inp.read_count(min_item_size=2)
        return cls(ProcessorResult.read_from(inp) for _ in range(count))


DocumentResult = Union[SimpleDocumentResult, VerboseDocumentResult]
