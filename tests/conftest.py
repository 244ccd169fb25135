"""
Pytest configuration and shared fixtures for the dspsim test suite.
"""

import copy
import sys
import tempfile
from pathlib import Path

import pytest
import yaml

# Ensure project root is on PYTHONPATH so 'dspsim' can be imported
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dspsim.adau146x import ADAU1467  # noqa: E402
from dspsim.core.spi_bus import SPIBus  # noqa: E402

REGISTER_TABLE = PROJECT_ROOT / "dspsim" / "configs" / "adau146x_registers.yaml"


@pytest.fixture
def temp_yaml_file():
    """
    Fixture that provides a temporary YAML file.

    Yields:
        Path: Path to the temporary YAML file
    """
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".yaml",
        delete=False,
    ) as f:
        temp_path = Path(f.name)

    yield temp_path

    # Cleanup
    if temp_path.exists():
        temp_path.unlink()


MEMORY_CFG = {
    "regions": [
        {"name": "DM0", "base": 0x0000, "size": 0x5000},
        {"name": "DM1", "base": 0x6000, "size": 0x5000},
        {"name": "PROGRAM", "base": 0xC000, "size": 0x3000},
    ]
}

PROTOCOL_CFG = {"chip_address": 0x00, "control_base": 0xF000, "idle_byte": 0x00}

PAGE_SELECT_CFG = {"register": 0xF899, "bit": 0}

SAFELOAD_CFG = {
    "data_base": 0x6000,
    "data_words": 5,
    "address_pointer": 0x6005,
    "trigger_lower": 0x6006,
    "trigger_upper": 0x6007,
}

GPIO_CFG = {"chip_select": 0, "reset": 31}


@pytest.fixture
def valid_device_config_dict():
    """
    Fixture providing a complete valid ADAU1467-style configuration dictionary.
    """
    return copy.deepcopy(
        {
            "device": {"name": "TEST1467", "registers": str(REGISTER_TABLE)},
            "memory": MEMORY_CFG,
            "protocol": PROTOCOL_CFG,
            "page_select": PAGE_SELECT_CFG,
            "safeload": SAFELOAD_CFG,
            "gpio": GPIO_CFG,
        }
    )


@pytest.fixture
def temp_config_yaml_file(temp_yaml_file, valid_device_config_dict):
    """
    Fixture that creates a temporary YAML file with valid configuration.

    Yields:
        Path: Path to the temporary YAML file with valid configuration
    """
    with open(temp_yaml_file, "w", encoding="utf-8") as f:
        yaml.dump(valid_device_config_dict, f)

    yield temp_yaml_file


@pytest.fixture
def dsp():
    """A freshly constructed ADAU1467."""
    return ADAU1467()


@pytest.fixture
def bus(dsp):
    """An SPI bus driving the dsp fixture."""
    return SPIBus(dsp)


def pytest_configure(config):
    """
    Hook for initial pytest configuration.
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests",
    )
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
