import pytest

from conway.config import EdgePolicy, SimulationConfig
from conway.exception import ConfigError, ConwayError


def test_defaults():
    config = SimulationConfig()
    assert config.shape == (1280, 720)
    assert config.alive_threshold == 0.9
    assert config.edge_policy is EdgePolicy.WRAP
    assert config.seed == 0
    assert config.tick_rate == 60
    assert config.steps_per_frame == 1
    assert config.window_res == (1280, 720)


def test_keyword_options():
    config = SimulationConfig(width=64, height=32, edge_policy="dead", cell_size=4)
    assert config.shape == (64, 32)
    assert config.window_res == (256, 128)
    assert config.edge_policy is EdgePolicy.DEAD
    assert "width=64" in repr(config)


def test_environment_options(monkeypatch):
    monkeypatch.setenv("CONWAY_WIDTH", "300")
    monkeypatch.setenv("CONWAY_ALIVE_THRESHOLD", "0.5")
    monkeypatch.setenv("CONWAY_EDGE_POLICY", "CLAMP")
    config = SimulationConfig()
    assert config.width == 300
    assert config.height == 720
    assert config.alive_threshold == 0.5
    assert config.edge_policy is EdgePolicy.CLAMP


def test_keyword_overrides_environment(monkeypatch):
    monkeypatch.setenv("CONWAY_SEED", "5")
    monkeypatch.setenv("CONWAY_HEIGHT", "")
    config = SimulationConfig(seed=9)
    assert config.seed == 9
    assert config.height == 720


@pytest.mark.parametrize(
    "options",
    [
        {"width": 0},
        {"height": -3},
        {"width": 65536, "height": 65536},
        {"alive_threshold": 1.5},
        {"alive_threshold": -0.1},
        {"seed": -1},
        {"seed": 2**32},
        {"tick_rate": -1},
        {"steps_per_frame": 0},
        {"cell_size": 0},
        {"edge_policy": "mirror"},
        {"width": "wide"},
    ],
)
def test_invalid_options(options):
    with pytest.raises(ConfigError):
        SimulationConfig(**options)


def test_invalid_environment_option(monkeypatch):
    monkeypatch.setenv("CONWAY_STEPS_PER_FRAME", "many")
    with pytest.raises(ConfigError, match="CONWAY_STEPS_PER_FRAME"):
        SimulationConfig()


def test_unknown_option():
    with pytest.raises(ConfigError, match="colour"):
        SimulationConfig(colour="green")


def test_config_error_types():
    with pytest.raises(ValueError):
        SimulationConfig(width=-1)
    assert issubclass(ConfigError, ConwayError)


@pytest.mark.parametrize("value", ["wrap", "WRAP", EdgePolicy.WRAP])
def test_edge_policy_parsing(value):
    assert SimulationConfig(edge_policy=value).edge_policy is EdgePolicy.WRAP
