"""JSON rendering of simulate responses, as returned by the REST layer.

Non-verbose::

    {"docs": [{"doc": {...}}, {"error": {"type": "...", "reason": "..."}}]}

Verbose::

    {"docs": [{"processor_results": [{"tag": "...", "doc": {...}}, ...]}]}

The on-disk envelope adds ``pipeline_id`` and ``verbose`` next to ``docs``.
"""

from __future__ import annotations

from typing import Any, Mapping

from ingest_simulate.common.errors import ContractError, InvalidResultError
from ingest_simulate.results.document import IngestDocument, thaw
from ingest_simulate.results.document_result import DocumentResult, SimpleDocumentResult, VerboseDocumentResult
from ingest_simulate.results.failure import FailureDescriptor
from ingest_simulate.results.processor import ProcessorResult
from ingest_simulate.results.response import PipelineSimulationResponse


def _require_mapping(value: Any, ctx: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ContractError(f"{ctx} must be an object")
    return value


def _require_list(value: Any, ctx: str) -> list:
    if not isinstance(value, list):
        raise ContractError(f"{ctx} must be an array")
    return value


def document_to_dict(document: IngestDocument) -> dict[str, Any]:
    out: dict[str, Any] = {"_index": document.index, "_id": document.id, "_source": thaw(document.source)}
    if document.type is not None:
        out["_type"] = document.type
    if document.ingest:
        out["_ingest"] = thaw(document.ingest)
    return out


def document_from_dict(payload: Any, ctx: str = "doc") -> IngestDocument:
    payload = _require_mapping(payload, ctx)
    for key in ("_index", "_id"):
        if not isinstance(payload.get(key), str):
            raise ContractError(f"{ctx}.{key} must be a string")
    doc_type = payload.get("_type")
    if doc_type is not None and not isinstance(doc_type, str):
        raise ContractError(f"{ctx}._type must be a string")
    source = _require_mapping(payload.get("_source", {}), f"{ctx}._source")
    ingest = _require_mapping(payload.get("_ingest", {}), f"{ctx}._ingest")
    return IngestDocument(index=payload["_index"], id=payload["_id"], source=source, type=doc_type, ingest=ingest)


def failure_to_dict(failure: FailureDescriptor) -> dict[str, str]:
    return {"type": failure.kind, "reason": failure.message}


def failure_from_dict(payload: Any, ctx: str = "error") -> FailureDescriptor:
    payload = _require_mapping(payload, ctx)
    reason = payload.get("reason")
    try:
        return FailureDescriptor(kind=payload.get("type"), message="" if reason is None else str(reason))
    except InvalidResultError as exc:
        raise ContractError(f"{ctx}: {exc}") from exc


def _outcome_from_dict(payload: Mapping[str, Any], ctx: str) -> tuple[IngestDocument | None, FailureDescriptor | None]:
    has_doc = "doc" in payload
    has_error = "error" in payload
    if has_doc == has_error:
        raise ContractError(f"{ctx} must carry exactly one of 'doc' or 'error'")
    if has_error:
        return None, failure_from_dict(payload["error"], f"{ctx}.error")
    return document_from_dict(payload["doc"], f"{ctx}.doc"), None


def processor_result_to_dict(result: ProcessorResult) -> dict[str, Any]:
    out: dict[str, Any] = {"tag": result.processor_tag}
    if result.failure is not None:
        out["error"] = failure_to_dict(result.failure)
    else:
        out["doc"] = document_to_dict(result.document)
    return out


def processor_result_from_dict(payload: Any, ctx: str) -> ProcessorResult:
    payload = _require_mapping(payload, ctx)
    tag = payload.get("tag")
    if not isinstance(tag, str):
        raise ContractError(f"{ctx}.tag must be a string")
    document, failure = _outcome_from_dict(payload, ctx)
    return ProcessorResult(processor_tag=tag, document=document, failure=failure)


def document_result_to_dict(result: DocumentResult) -> dict[str, Any]:
    if isinstance(result, VerboseDocumentResult):
        return {"processor_results": [processor_result_to_dict(item) for item in result.processor_results]}
    if result.failure is not None:
        return {"error": failure_to_dict(result.failure)}
    return {"doc": document_to_dict(result.document)}


def document_result_from_dict(payload: Any, verbose: bool, ctx: str) -> DocumentResult:
    payload = _require_mapping(payload, ctx)
    if verbose:
        items = _require_list(payload.get("processor_results"), f"{ctx}.processor_results")
        return VerboseDocumentResult(
            processor_result_from_dict(item, f"{ctx}.processor_results[{idx}]") for idx, item in enumerate(items)
        )
    document, failure = _outcome_from_dict(payload, ctx)
    return SimpleDocumentResult(document=document, failure=failure)


def response_to_dict(response: PipelineSimulationResponse) -> dict[str, Any]:
    return {"docs": [document_result_to_dict(result) for result in response.results]}


def response_from_dict(payload: Any, *, pipeline_id: str, verbose: bool) -> PipelineSimulationResponse:
    payload = _require_mapping(payload, "response")
    docs = _require_list(payload.get("docs"), "response.docs")
    results = [document_result_from_dict(item, verbose, f"docs[{idx}]") for idx, item in enumerate(docs)]
    return PipelineSimulationResponse(pipeline_id, verbose, results)


def envelope_to_dict(response: PipelineSimulationResponse) -> dict[str, Any]:
    out = response_to_dict(response)
    out["pipeline_id"] = response.pipeline_id
    out["verbose"] = response.verbose
    return out


def envelope_from_dict(payload: Any) -> PipelineSimulationResponse:
    payload = _require_mapping(payload, "envelope")
    pipeline_id = payload.get("pipeline_id")
    verbose = payload.get("verbose")
    if not isinstance(pipeline_id, str):
        raise ContractError("envelope.pipeline_id must be a string")
    if not isinstance(verbose, bool):
        raise ContractError("envelope.verbose must be a boolean")
    return response_from_dict(payload, pipeline_id=pipeline_id, verbose=verbose)
