"""Pipeline simulate response and its binary codec.

Wire layout, in order: pipeline id, verbose flag, result count, then each
document result. Elements carry no variant tag of their own; the envelope's
verbose flag decides how every one of them is read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ingest_simulate.common.errors import InvalidResultError
from ingest_simulate.results.document_result import DocumentResult, SimpleDocumentResult, VerboseDocumentResult
from ingest_simulate.wire.stream import StreamInput, StreamOutput

_RESULT_TYPES = {
    False: SimpleDocumentResult,
    True: VerboseDocumentResult,
}


@dataclass(frozen=True)
class PipelineSimulationResponse:
    pipeline_id: str
    verbose: bool
    results: tuple[DocumentResult, ...]

    def __init__(self, pipeline_id: str, verbose: bool, results: Iterable[DocumentResult] = ()) -> None:
        if not isinstance(pipeline_id, str):
            raise InvalidResultError("pipeline_id must be str")
        if not isinstance(verbose, bool):
            raise InvalidResultError("verbose must be bool")
        expected = _RESULT_TYPES[verbose]
        results = tuple(results)
        for position, result in enumerate(results):
            if type(result) is not expected:
                raise InvalidResultError(
                    f"result {position} is {type(result).__name__}, "
                    f"expected {expected.__name__} for verbose={verbose}"
                )
        object.__setattr__(self, "pipeline_id", pipeline_id)
        object.__setattr__(self, "verbose", verbose)
        object.__setattr__(self, "results", results)

    @property
    def document_count(self) -> int:
        return len(self.results)

    @property
    def failed_count(self) -> int:
        return sum(1 for result in self.results if result.is_failure)

    def write_to(self, out: StreamOutput) -> None:
        out.write_string(self.pipeline_id)
        out.write_bool(self.verbose)
        out.write_vint(len(self.results))
        for result in self.results:
            result.write_to(out)

    @classmethod
    def read_from(cls, inp: StreamInput) -> "PipelineSimulationResponse":
        pipeline_id = inp.read_string()
        verbose = inp.read_bool()
        count = inp.read_count()
        result_type = _RESULT_TYPES[verbose]
        results = [result_type.read_from(inp) for _ in range(count)]
        return cls(pipeline_id, verbose, results)


def encode(response: PipelineSimulationResponse) -> bytes:
    out = StreamOutput()
    response.write_to(out)
    return out.getvalue()


def decode(data: bytes | bytearray | memoryview) -> PipelineSimulationResponse:
    """Decode a complete response, raising ``DecodingError`` on any defect.

    Trailing bytes after the last result count as a defect too.
    """
    inp = StreamInput(data)
    response = PipelineSimulationResponse.read_from(inp)
    inp.ensure_exhausted()
    return response
