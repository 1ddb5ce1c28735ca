import pytest

from idskit.config import (
    CaptureConfig,
    CommandLineOptions,
    Config,
    PerformanceConfig,
    RuleConfig,
)

SAMPLE_YAML = """# sample configuration
capture:
  interface: "eth1"
  timeout_ms: 250
  buffer_size: 4096
  promiscuous: false
  filter: 'tcp port 80'
logging:
  level: INFO
  ratio: 0.75
"""


@pytest.fixture
def sample():
    config = Config()
    config.load_from_yaml(SAMPLE_YAML)
    return config


def test_yaml_sections_and_types(sample):
    assert sample.get("capture.interface", "") == "eth1"
    assert sample.get("capture.timeout_ms", 0) == 250
    assert sample.get("capture.buffer_size", 0) == 4096
    assert sample.get("capture.promiscuous", True) is False
    assert sample.get("capture.filter", "") == "tcp port 80"
    assert sample.get("logging.level", "") == "INFO"
    assert sample.get("logging.ratio", 0.0) == 0.75


def test_yaml_keys_in_order(sample):
    assert sample.keys() == [
        "capture.interface",
        "capture.timeout_ms",
        "capture.buffer_size",
        "capture.promiscuous",
        "capture.filter",
        "logging.level",
        "logging.ratio",
    ]


def test_yaml_numeric_prefix_and_fallback_to_string():
    config = Config()
    config.load_from_yaml("count: 12abc\nname: abc\nversion: 1.2.3\nbig: 99999999999999999999\n")
    assert config.get("count") == 12
    assert config.get("name") == "abc"
    assert config.get("version") == 1.2
    assert config.get("big") == "99999999999999999999"


def test_quoted_number_is_still_numeric():
    config = Config()
    config.load_from_yaml('port: "8080"\n')
    assert config.get("port", 0) == 8080


def test_get_type_mismatch_returns_default(sample):
    assert sample.get("capture.interface", 7) == 7
    assert sample.get("capture.promiscuous", 3) == 3
    assert sample.get("capture.timeout_ms", False) is False
    assert sample.get("missing.key", "fallback") == "fallback"
    assert sample.get("capture.timeout_ms") == 250


def test_set_has_remove_clear():
    config = Config()
    config.set("a.b", 1)
    assert config.has_key("a.b")
    assert config.remove("a.b") is True
    assert config.remove("a.b") is False
    assert not config.has_key("a.b")
    config.set("x", "y")
    config.clear()
    assert config.keys() == []


def test_json_lines_keep_quoted_keys():
    config = Config()
    config.load_from_json('{\n  "buffer_size": 100,\n  "enabled": true,\n  "name": "eth0"\n}\n')
    assert config.get('"buffer_size"', 0) == 100
    assert config.get('"enabled"', False) is True
    assert config.get('"name"', "") == "eth0"
    assert not config.has_key("buffer_size")


def test_to_yaml_pinned_layout():
    config = Config()
    config.set("capture.interface", "eth0")
    config.set("debug", True)
    assert config.to_yaml() == 'debug: true\ncapture:\n  interface: "eth0"\n\n'
    assert str(config) == config.to_yaml()


def test_to_yaml_round_trip(sample):
    reloaded = Config()
    reloaded.load_from_yaml(sample.to_yaml())
    assert sorted(reloaded.keys()) == sorted(sample.keys())
    for key in sample.keys():
        assert reloaded.get(key) == sample.get(key)


def test_file_round_trip(tmp_path, sample):
    path = tmp_path / "ids.yaml"
    sample.save_to_file(path)
    loaded = Config(path)
    assert loaded.get("capture.interface", "") == "eth1"
    assert loaded.get("capture.buffer_size", 0) == 4096


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        Config().load_from_file(tmp_path / "absent.yaml")


def test_constructor_ignores_missing_file(tmp_path):
    config = Config(tmp_path / "absent.yaml")
    assert config.keys() == []


def test_validate_accepts_good_config(sample):
    assert sample.validate() is True
    assert sample.validation_errors == []


def test_validate_reports_errors():
    config = Config()
    config.set("capture.interface", "")
    config.set("capture.timeout_ms", -1)
    config.set("capture.snaplen", 0)
    config.set("logging.level", "LOUD")
    config.set("logging.format", "xml")
    assert config.validate() is False
    assert config.validation_errors == [
        "Capture interface cannot be empty",
        "Capture timeout must be non-negative",
        "Capture snaplen must be between 1 and 65535",
        "Invalid logging level: LOUD",
        "Invalid logging format: xml",
    ]


def test_apply_command_line_options():
    config = Config()
    options = CommandLineOptions(
        interface="eth2",
        rule_files=["local.rules", "community.rules"],
        log_level="INFO",
        output_format="json",
        debug_mode=True,
    )
    config.apply_command_line_options(options)
    assert config.get("capture.interface", "") == "eth2"
    assert config.get("logging.level", "") == "DEBUG"
    assert config.get("logging.format", "") == "json"
    assert config.get("rules.rule_files.0", "") == "local.rules"
    assert config.validate() is True


def test_apply_empty_options_changes_nothing(sample):
    before = {key: sample.get(key) for key in sample.keys()}
    sample.apply_command_line_options(CommandLineOptions())
    assert {key: sample.get(key) for key in sample.keys()} == before


def test_capture_config_defaults_and_values(sample):
    assert CaptureConfig.from_config(Config()) == CaptureConfig()
    capture = CaptureConfig.from_config(sample)
    assert capture.interface == "eth1"
    assert capture.timeout_ms == 250
    assert capture.buffer_size == 4096
    assert capture.promiscuous is False
    assert capture.snaplen == 65535


def test_rule_and_performance_config():
    config = Config()
    config.load_from_yaml(
        "rules:\n  auto_reload: false\n  reload_interval: 60\n"
        "performance:\n  queue_size: 500\n  batch_size: 25\n"
    )
    rules = RuleConfig.from_config(config)
    assert rules.auto_reload is False
    assert rules.reload_interval == 60
    perf = PerformanceConfig.from_config(config)
    assert perf.queue_size == 500
    assert perf.batch_size == 25
    assert perf.cpu_affinity is True
    assert perf.worker_threads == PerformanceConfig().worker_threads