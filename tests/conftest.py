from pathlib import Path

import pytest

from utilities import load_config

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def default_conf_path():
    return ROOT / "default.conf"


@pytest.fixture
def default_config(default_conf_path):
    return load_config(default_conf_path)


@pytest.fixture
def enigma(default_config):
    """Enigma I with reflectors B and C and rotors I to V."""
    return default_config.build_machine()
