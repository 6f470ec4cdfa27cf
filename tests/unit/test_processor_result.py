import pytest

from ingest_simulate.common.errors import DecodingError, InvalidResultError
from ingest_simulate.results.document import IngestDocument
from ingest_simulate.results.failure import FailureDescriptor
from ingest_simulate.results.processor import ProcessorResult
from ingest_simulate.wire.stream import StreamInput, StreamOutput

DOC = IngestDocument(index="idx", id="1", source={"a": "1"})
FAILURE = FailureDescriptor("RuntimeException", "boom")


def test_success_and_failed_constructors():
    ok = ProcessorResult.success("set-1", DOC)
    bad = ProcessorResult.failed("rename-2", FAILURE)

    assert ok.document == DOC and ok.failure is None and not ok.is_failure
    assert bad.failure == FAILURE and bad.document is None and bad.is_failure


def test_both_document_and_failure_is_rejected():
    with pytest.raises(InvalidResultError):
        ProcessorResult("tag", document=DOC, failure=FAILURE)


def test_neither_document_nor_failure_is_rejected():
    with pytest.raises(InvalidResultError):
        ProcessorResult("tag")


def test_failure_slot_must_hold_a_descriptor():
    with pytest.raises(InvalidResultError):
        ProcessorResult.failed("tag", RuntimeError("boom"))


@pytest.mark.parametrize("result", [ProcessorResult.success("a", DOC), ProcessorResult.failed("b", FAILURE)])
def test_wire_round_trip(result):
    out = StreamOutput()
    result.write_to(out)
    assert ProcessorResult.read_from(StreamInput(out.getvalue())) == result


def test_unknown_discriminant_is_malformed():
    out = StreamOutput()
    out.write_string("tag")
    out.write_byte(9)
    with pytest.raises(DecodingError):
        ProcessorResult.read_from(StreamInput(out.getvalue()))
