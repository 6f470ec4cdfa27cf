import json
import logging
import time
from pathlib import Path

from ingest_simulate.common.ids import generate_run_id
from ingest_simulate.common.logging import JsonLineFormatter, build_logger, log_event
from ingest_simulate.common.time_utils import elapsed_ms, utc_timestamp_iso


def test_generate_run_id_prefix():
    assert generate_run_id().startswith("sim-")


def test_utc_timestamp_iso_has_offset():
    assert utc_timestamp_iso().endswith("+00:00")


def test_elapsed_ms_is_non_negative():
    assert elapsed_ms(time.monotonic()) >= 0


def test_json_line_formatter_emits_stable_schema():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    record.event = "COMMAND_START"
    payload = json.loads(JsonLineFormatter().format(record))

    assert payload["message"] == "hello"
    assert payload["event"] == "COMMAND_START"
    assert payload["error_code"] is None
    assert payload["level"] == "INFO"


def test_build_logger_writes_jsonl_file(tmp_path: Path):
    logger = build_logger("sim-test", data_dir=tmp_path)
    log_event(logger, "command end", run_id="sim-test", docs_in=2, docs_failed=1)
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "run_meta" / "sim-test.log.jsonl").read_text(encoding="utf-8").splitlines()
    payload = json.loads(lines[-1])
    assert payload["docs_in"] == 2
    assert payload["docs_failed"] == 1
