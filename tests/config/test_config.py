"""Test the configuration module functionality."""

from resflow.config import FLOW_CONFIG, FlowConfig


def test_flow_config_defaults():
    config = FlowConfig()

    assert config.source == "s"
    assert config.sink == "t"
    assert config.capacity_attr == "capacity"
    assert config.agreement_tolerance == 1e-9
    assert config.graph_suffixes == (".txt", ".yaml", ".yml")


def test_values_agree_is_relative():
    config = FlowConfig()

    assert config.values_agree(23.0, 23.0)
    assert config.values_agree(0.0, 1e-10)
    assert not config.values_agree(0.0, 1e-6)
    # Large values are compared relative to their magnitude
    assert config.values_agree(1e12, 1e12 + 100)
    assert not config.values_agree(1e12, 1.001e12)


def test_custom_config():
    config = FlowConfig(source="A", sink="C", agreement_tolerance=0.01)

    assert (config.source, config.sink) == ("A", "C")
    assert config.values_agree(100.0, 100.5)
    assert not config.values_agree(100.0, 102.0)


def test_global_config_instance():
    assert isinstance(FLOW_CONFIG, FlowConfig)
    assert FLOW_CONFIG.source == "s"
    assert FLOW_CONFIG.values_agree(10.0, 10.0)
