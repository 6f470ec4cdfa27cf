import json
from pathlib import Path

from ingest_simulate.reports.summary import build_simulation_report, write_simulation_report
from ingest_simulate.results.document import IngestDocument
from ingest_simulate.results.document_result import SimpleDocumentResult, VerboseDocumentResult
from ingest_simulate.results.failure import FailureDescriptor
from ingest_simulate.results.processor import ProcessorResult
from ingest_simulate.results.response import PipelineSimulationResponse

DOC = IngestDocument(index="idx", id="1", source={"a": "1"})


def test_simple_report_counts_failures_by_kind():
    response = PipelineSimulationResponse(
        "pipe",
        False,
        [
            SimpleDocumentResult.success(DOC),
            SimpleDocumentResult.failed(FailureDescriptor("IllegalArgumentException", "a")),
            SimpleDocumentResult.failed(FailureDescriptor("IllegalArgumentException", "b")),
        ],
    )
    report = build_simulation_report(response)

    assert report["status"] == "partial"
    assert report["counts"] == {"documents": 3, "succeeded": 1, "failed": 2}
    assert report["failed_documents"] == [1, 2]
    assert report["failures_by_kind"] == {"IllegalArgumentException": 2}
    assert "processors" not in report


def test_verbose_report_counts_processors():
    response = PipelineSimulationResponse(
        "pipe",
        True,
        [
            VerboseDocumentResult([ProcessorResult.success("set", DOC), ProcessorResult.success("rename", DOC)]),
            VerboseDocumentResult(
                [ProcessorResult.success("set", DOC), ProcessorResult.failed("rename", FailureDescriptor("E", "x"))]
            ),
        ],
    )
    report = build_simulation_report(response)

    assert report["processors"] == {
        "rename": {"executed": 2, "failed": 1},
        "set": {"executed": 2, "failed": 0},
    }
    assert report["counts"]["failed"] == 1


def test_empty_response_reports_success():
    report = build_simulation_report(PipelineSimulationResponse("pipe", False, []))
    assert report["status"] == "success"
    assert report["counts"] == {"documents": 0, "succeeded": 0, "failed": 0}


def test_write_simulation_report(tmp_path: Path):
    path = write_simulation_report(
        tmp_path / "out" / "report.json",
        PipelineSimulationResponse("pipe", False, [SimpleDocumentResult.success(DOC)]),
        run_id="sim-test",
    )
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["run_id"] == "sim-test"
    assert payload["status"] == "success"
