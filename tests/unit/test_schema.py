import copy

import pytest

from ingest_simulate.common.errors import ConfigError
from ingest_simulate.common.schema import validate_simulate_config


BASE_CONFIG = {
    "cluster": {
        "endpoint": "http://localhost:9200",
        "timeout": {"connect": 5, "read": 30},
        "retry": {"max_attempts": 2, "multiplier": 0.5, "max_wait": 5},
        "headers": {},
    },
    "output": {
        "response_filename": "r.json",
        "encoded_filename": "r.bin",
        "report_filename": "report.json",
    },
}


def test_validate_simulate_config_accepts_valid_shape():
    validated = validate_simulate_config(copy.deepcopy(BASE_CONFIG))
    assert validated["cluster"]["endpoint"] == "http://localhost:9200"


def test_validate_simulate_config_rejects_unknown_key_by_default():
    bad = copy.deepcopy(BASE_CONFIG)
    bad["unexpected"] = True
    with pytest.raises(ConfigError):
        validate_simulate_config(bad)


def test_validate_simulate_config_allows_unknown_when_enabled():
    okay = copy.deepcopy(BASE_CONFIG)
    okay["extra"] = 1
    okay["cluster"]["extra"] = 2
    validate_simulate_config(okay, allow_unknown=True)


def test_validate_simulate_config_rejects_missing_output_names():
    bad = copy.deepcopy(BASE_CONFIG)
    del bad["output"]["encoded_filename"]
    with pytest.raises(ConfigError, match="encoded_filename"):
        validate_simulate_config(bad)


@pytest.mark.parametrize(
    ("section", "key", "value"),
    [
        ("timeout", "connect", 0),
        ("timeout", "read", "slow"),
        ("retry", "max_attempts", 0),
        ("retry", "max_attempts", True),
        ("retry", "max_wait", -1),
    ],
)
def test_validate_simulate_config_rejects_bad_numbers(section, key, value):
    bad = copy.deepcopy(BASE_CONFIG)
    bad["cluster"][section][key] = value
    with pytest.raises(ConfigError):
        validate_simulate_config(bad)


def test_validate_simulate_config_rejects_non_http_endpoint():
    bad = copy.deepcopy(BASE_CONFIG)
    bad["cluster"]["endpoint"] = "localhost:9200"
    with pytest.raises(ConfigError):
        validate_simulate_config(bad)


def test_validate_simulate_config_rejects_non_mapping_config():
    with pytest.raises(ConfigError):
        validate_simulate_config(["cluster"])


@pytest.mark.parametrize(
    ("path", "key"),
    [
        (("cluster", "timeout"), "total"),
        (("cluster", "retry"), "jitter"),
        (("output",), "archive_filename"),
    ],
)
def test_validate_simulate_config_rejects_unknown_nested_keys(path, key):
    bad = copy.deepcopy(BASE_CONFIG)
    section = bad
    for name in path:
        section = section[name]
    section[key] = 1
    with pytest.raises(ConfigError, match=key):
        validate_simulate_config(bad)
    validate_simulate_config(bad, allow_unknown=True)
