"""Simulation report aggregation."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from ingest_simulate.common.fs import write_json
from ingest_simulate.results.document_result import VerboseDocumentResult
from ingest_simulate.results.response import PipelineSimulationResponse


def _processor_counts(response: PipelineSimulationResponse) -> dict[str, dict[str, int]]:
    executed: Counter[str] = Counter()
    failed: Counter[str] = Counter()
    for result in response.results:
        if not isinstance(result, VerboseDocumentResult):
            continue
        for processor_result in result.processor_results:
            executed[processor_result.processor_tag] += 1
            if processor_result.is_failure:
                failed[processor_result.processor_tag] += 1
    return {tag: {"executed": executed[tag], "failed": failed[tag]} for tag in sorted(executed)}


def build_simulation_report(response: PipelineSimulationResponse) -> dict:
    failures_by_kind: Counter[str] = Counter()
    failed_documents = []
    for position, result in enumerate(response.results):
        if not result.is_failure:
            continue
        failed_documents.append(position)
        for failure in result.failures:
            failures_by_kind[failure.kind] += 1

    failed_count = len(failed_documents)
    report = {
        "pipeline_id": response.pipeline_id,
        "verbose": response.verbose,
        "status": "partial" if failed_count else "success",
        "counts": {
            "documents": response.document_count,
            "succeeded": response.document_count - failed_count,
            "failed": failed_count,
        },
        "failed_documents": failed_documents,
        "failures_by_kind": dict(sorted(failures_by_kind.items())),
    }
    if response.verbose:
        report["processors"] = _processor_counts(response)
    return report


def write_simulation_report(path: Path, response: PipelineSimulationResponse, run_id: str) -> Path:
    payload = build_simulation_report(response)
    payload["run_id"] = run_id
    write_json(path, payload)
    return path
