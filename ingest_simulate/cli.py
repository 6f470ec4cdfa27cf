"""CLI entrypoint for ingest pipeline simulate runs."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Callable

from ingest_simulate.client.simulate_client import simulate_pipeline
from ingest_simulate.common.config_loader import SimulateConfig, load_config
from ingest_simulate.common.constants import COMMANDS, EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from ingest_simulate.common.errors import ContractError, SimulationError
from ingest_simulate.common.fs import read_json, write_bytes, write_json
from ingest_simulate.common.http import HttpClient
from ingest_simulate.common.ids import generate_run_id
from ingest_simulate.common.logging import build_logger, log_event
from ingest_simulate.common.time_utils import elapsed_ms
from ingest_simulate.reports.summary import write_simulation_report
from ingest_simulate.results.response import PipelineSimulationResponse, decode, encode
from ingest_simulate.results.xcontent import document_from_dict, envelope_from_dict, envelope_to_dict


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--input", required=True)
    parser.add_argument("--output", default=None)
    parser.add_argument("--pipeline-id", default=None)
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    return parser.parse_args(argv)


def _load_documents(path: Path) -> list:
    payload = read_json(path)
    if isinstance(payload, dict):
        payload = payload.get("docs")
    if not isinstance(payload, list):
        raise ContractError(f"{path} must hold a list of documents or an object with 'docs'")
    return [document_from_dict(item, f"docs[{idx}]") for idx, item in enumerate(payload)]


def _load_response(path: Path) -> PipelineSimulationResponse:
    if path.suffix == ".json":
        return envelope_from_dict(read_json(path))
    return decode(path.read_bytes())


def _output_path(args: argparse.Namespace, cfg: SimulateConfig, key: str) -> Path:
    if args.output:
        return Path(args.output)
    return Path(args.data_dir) / "out" / cfg.output[key]


def execute_command(
    args: argparse.Namespace,
    cfg: SimulateConfig,
    run_id: str,
    http_factory: Callable[[dict], HttpClient],
) -> PipelineSimulationResponse:
    input_path = Path(args.input)
    if args.command == "simulate":
        if not args.pipeline_id:
            raise ContractError("--pipeline-id is required for simulate")
        documents = _load_documents(input_path)
        with http_factory(cfg.cluster) as http:
            response = simulate_pipeline(http, cfg.cluster, args.pipeline_id, documents, verbose=args.verbose)
        out_dir = Path(args.data_dir) / "out"
        write_json(out_dir / cfg.output["response_filename"], envelope_to_dict(response))
        write_bytes(out_dir / cfg.output["encoded_filename"], encode(response))
        write_simulation_report(out_dir / cfg.output["report_filename"], response, run_id)
    elif args.command == "encode":
        response = envelope_from_dict(read_json(input_path))
        write_bytes(_output_path(args, cfg, "encoded_filename"), encode(response))
    elif args.command == "decode":
        response = decode(input_path.read_bytes())
        write_json(_output_path(args, cfg, "response_filename"), envelope_to_dict(response))
    elif args.command == "report":
        response = _load_response(input_path)
        write_simulation_report(_output_path(args, cfg, "report_filename"), response, run_id)
    else:
        raise ValueError(f"Unknown command: {args.command}")
    return response


def run_command(
    args: argparse.Namespace,
    http_factory: Callable[[dict], HttpClient] = HttpClient.from_cluster_config,
) -> int:
    run_id = args.run_id or generate_run_id()
    data_dir = Path(args.data_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)

    started = time.monotonic()
    log_event(logger, "command start", run_id=run_id, command=args.command, event="COMMAND_START", status="ok")
    try:
        cfg = load_config(Path(args.config_dir), overlay_config_dir=overlay_config_dir)
        response = execute_command(args, cfg, run_id, http_factory)
    except SimulationError as exc:
        log_event(
            logger,
            f"{args.command} failed: {exc}",
            run_id=run_id,
            command=args.command,
            event="COMMAND_FAIL",
            status="error",
            duration_ms=elapsed_ms(started),
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL
    except Exception as exc:
        log_event(
            logger,
            f"{args.command} failed unexpectedly: {exc}",
            run_id=run_id,
            command=args.command,
            event="COMMAND_FAIL",
            status="error",
            duration_ms=elapsed_ms(started),
            error_code="UNEXPECTED_ERROR",
        )
        return EXIT_HARD_FAIL

    log_event(
        logger,
        "command end",
        run_id=run_id,
        command=args.command,
        pipeline_id=response.pipeline_id,
        event="COMMAND_END",
        status="partial" if response.failed_count else "ok",
        duration_ms=elapsed_ms(started),
        docs_in=response.document_count,
        docs_failed=response.failed_count,
    )
    if response.failed_count and args.command in ("simulate", "report"):
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])
    try:
        return run_command(args)
    except SimulationError:
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
