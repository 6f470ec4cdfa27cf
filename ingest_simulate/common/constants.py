"""Application constants."""

USER_AGENT = "ingest-simulate/0.3 (+pipeline dry runs)"
COMMANDS = (
    "simulate",
    "encode",
    "decode",
    "report",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
RETRYABLE_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "command",
    "pipeline_id",
    "event",
    "status",
    "duration_ms",
    "docs_in",
    "docs_failed",
    "error_code",
    "message",
)
