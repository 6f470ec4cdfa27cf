"""Query carried by a transform, passed through to the query parser untouched."""

from __future__ import annotations

import copy
from typing import Any, Callable, Mapping

from ingest_simulate.common.errors import ContractError
from ingest_simulate.results.document import freeze


def parse_inner_query(payload: Any) -> dict[str, Any]:
    """Check the outer shape of a query: ``{"<query type>": {...}}``."""
    if not isinstance(payload, Mapping) or len(payload) != 1:
        raise ContractError("query must be an object with exactly one query type")
    (query_type, body), = payload.items()
    if not isinstance(query_type, str) or not isinstance(body, Mapping):
        raise ContractError(f"query {query_type!r} must map to an object")
    return copy.deepcopy(dict(payload))


class QueryConfig:
    def __init__(self, query: Mapping[str, Any] | None) -> None:
        self._query = query

    @classmethod
    def from_dict(
        cls,
        payload: Any,
        parser: Callable[[Any], Mapping[str, Any]] = parse_inner_query,
    ) -> "QueryConfig":
        return cls(parser(payload))

    @property
    def query(self) -> Mapping[str, Any] | None:
        return self._query

    def to_dict(self) -> dict[str, Any] | None:
        return copy.deepcopy(dict(self._query)) if self._query is not None else None

    def is_valid(self) -> bool:
        return self._query is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryConfig):
            return NotImplemented
        return self._query == other._query

    def __hash__(self) -> int:
        return hash(freeze(self._query))

    def __repr__(self) -> str:
        return f"QueryConfig({self._query!r})"
