"""Run a pipeline simulate request against a cluster."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import quote

from ingest_simulate.common.errors import ContractError
from ingest_simulate.common.http import HttpClient
from ingest_simulate.results.document import IngestDocument
from ingest_simulate.results.response import PipelineSimulationResponse
from ingest_simulate.results.xcontent import document_to_dict, response_from_dict


def simulate_url(endpoint: str, pipeline_id: str) -> str:
    return f"{endpoint.rstrip('/')}/_ingest/pipeline/{quote(pipeline_id, safe='')}/_simulate"


def _request_doc(document: IngestDocument) -> dict:
    # The cluster assigns ingest metadata itself; only identity and source are sent.
    body = document_to_dict(document)
    body.pop("_ingest", None)
    return body


def simulate_pipeline(
    http: HttpClient,
    cluster_config: dict,
    pipeline_id: str,
    documents: Sequence[IngestDocument],
    *,
    verbose: bool = False,
) -> PipelineSimulationResponse:
    params = {"verbose": "true"} if verbose else None
    payload = http.post_json(
        simulate_url(cluster_config["endpoint"], pipeline_id),
        body={"docs": [_request_doc(doc) for doc in documents]},
        params=params,
    )
    response = response_from_dict(payload, pipeline_id=pipeline_id, verbose=verbose)
    if response.document_count != len(documents):
        raise ContractError(
            f"simulate returned {response.document_count} results for {len(documents)} documents"
        )
    return response
