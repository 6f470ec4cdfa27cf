"""Document-or-failure slot shared by processor and simple document results."""

from __future__ import annotations

from ingest_simulate.common.errors import DecodingError, InvalidResultError
from ingest_simulate.results.document import IngestDocument
from ingest_simulate.results.failure import FailureDescriptor
from ingest_simulate.wire.stream import StreamInput, StreamOutput

OUTCOME_SUCCESS = 0
OUTCOME_FAILURE = 1


def require_exactly_one(document: IngestDocument | None, failure: FailureDescriptor | None, ctx: str) -> None:
    if (document is None) == (failure is None):
        raise InvalidResultError(f"{ctx} needs exactly one of document or failure")
    if document is not None and not isinstance(document, IngestDocument):
        raise InvalidResultError(f"{ctx} document must be an IngestDocument, got {type(document).__name__}")
    if failure is not None and not isinstance(failure, FailureDescriptor):
        raise InvalidResultError(f"{ctx} failure must be a FailureDescriptor, got {type(failure).__name__}")


def write_outcome(out: StreamOutput, document: IngestDocument | None, failure: FailureDescriptor | None) -> None:
    if failure is not None:
        out.write_byte(OUTCOME_FAILURE)
        failure.write_to(out)
    else:
        out.write_byte(OUTCOME_SUCCESS)
        document.write_to(out)


def read_outcome(inp: StreamInput) -> tuple[IngestDocument | None, FailureDescriptor | None]:
    discriminant = inp.read_byte()
    if discriminant == OUTCOME_SUCCESS:
        return IngestDocument.read_from(inp), None
    if discriminant == OUTCOME_FAILURE:
        return None, FailureDescriptor.read_from(inp)
    raise DecodingError(f"unknown outcome discriminant {discriminant:#04x}")
