"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from ingest_simulate.common.errors import ConfigError


def _assert_mapping(obj: object, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    _assert_mapping(obj, ctx)
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_number(value: object, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number")


def validate_simulate_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"cluster", "output"}
    _assert_required_keys(cfg, top_required, "simulate config")
    _assert_no_unknown_keys(cfg, top_required, "simulate config", allow_unknown)

    cluster = cfg["cluster"]
    cluster_known = {"endpoint", "timeout", "retry", "headers"}
    _assert_required_keys(cluster, {"endpoint", "timeout", "retry"}, "cluster")
    _assert_no_unknown_keys(cluster, cluster_known, "cluster", allow_unknown)
    if not isinstance(cluster["endpoint"], str) or not cluster["endpoint"].startswith(("http://", "https://")):
        raise ConfigError("cluster.endpoint must be an http(s) URL")

    timeout_keys = {"connect", "read"}
    _assert_required_keys(cluster["timeout"], timeout_keys, "cluster.timeout")
    _assert_no_unknown_keys(cluster["timeout"], timeout_keys, "cluster.timeout", allow_unknown)
    for key in ("connect", "read"):
        _assert_positive_number(cluster["timeout"][key], f"cluster.timeout.{key}")

    retry_keys = {"max_attempts", "multiplier", "max_wait"}
    _assert_required_keys(cluster["retry"], retry_keys, "cluster.retry")
    _assert_no_unknown_keys(cluster["retry"], retry_keys, "cluster.retry", allow_unknown)
    max_attempts = cluster["retry"]["max_attempts"]
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise ConfigError("cluster.retry.max_attempts must be an integer >= 1")
    _assert_positive_number(cluster["retry"]["multiplier"], "cluster.retry.multiplier")
    _assert_positive_number(cluster["retry"]["max_wait"], "cluster.retry.max_wait")

    if cluster.get("headers") is not None:
        _assert_mapping(cluster["headers"], "cluster.headers")

    output_keys = {"response_filename", "encoded_filename", "report_filename"}
    _assert_required_keys(cfg["output"], output_keys, "output")
    _assert_no_unknown_keys(cfg["output"], output_keys, "output", allow_unknown)
    return cfg
