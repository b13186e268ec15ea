import json
import logging

import pytest

from shader_nodes.config import CompilerSettings
from shader_nodes.errors import ConfigError
from shader_nodes.graph_extract.compiler import MaterialCompiler
from shader_nodes.logger import LOGGER_NAME, get_logger, setup_logger

from conftest import make_edge, make_node


def test_defaults():
    settings = CompilerSettings()
    assert settings.debounce_ms == 100
    assert settings.preview_size == 64
    assert settings.preview_max_depth == 10
    assert settings.log_level == "INFO"


def test_save_load_round_trip(tmp_path):
    path = tmp_path / "settings.json"
    CompilerSettings(debounce_ms=250, preview_size=32).save(path)

    loaded = CompilerSettings.load(path)
    assert loaded == CompilerSettings(debounce_ms=250, preview_size=32)


def test_unknown_keys_are_ignored():
    settings = CompilerSettings.from_dict({'debounce_ms': 50, 'theme': 'dark'})
    assert settings.debounce_ms == 50
    assert not hasattr(settings, 'theme')


@pytest.mark.parametrize("data", [
    {'debounce_ms': -1},
    {'debounce_ms': 'fast'},
    {'preview_size': 0},
    {'preview_max_depth': True},
    {'log_level': 10},
])
def test_invalid_values(data):
    with pytest.raises(ConfigError):
        CompilerSettings.from_dict(data)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        CompilerSettings.load(tmp_path / "nope.json")


def test_malformed_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{debounce_ms: 1", encoding="utf-8")
    with pytest.raises(ConfigError):
        CompilerSettings.load(path)

    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    with pytest.raises(ConfigError, match="JSON object"):
        CompilerSettings.load(path)


def test_setup_logger_levels():
    logger = setup_logger("DEBUG")
    assert logger is get_logger()
    assert logger.name == LOGGER_NAME
    assert logging.getLogger('shader_nodes').level == logging.DEBUG

    setup_logger(logging.WARNING)
    assert len(get_logger().handlers) == 1
    assert logging.getLogger('shader_nodes').level == logging.WARNING


def test_compile_errors_are_logged(caplog):
    setup_logger(logging.INFO)
    nodes = [make_node('v1', 'vec2'), make_node('s1', 'split'), make_node('out', 'material')]
    edges = [make_edge('v1', 's1', 'in'), make_edge('s1', 'out', 'color', 'z')]
    with caplog.at_level(logging.ERROR, logger='shader_nodes'):
        MaterialCompiler().compile(nodes, edges)
    assert "Material compilation failed" in caplog.text
