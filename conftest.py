import sys
from pathlib import Path

import pytest

# Make the in-tree package importable without installing it
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path_factory, monkeypatch):
    """Keep the user's pydefaults settings out of the tests."""
    monkeypatch.setenv("PYDEFAULTS_CONFIG_DIR", str(tmp_path_factory.mktemp("config")))
    monkeypatch.delenv("PYDEFAULTS_COMMAND", raising=False)
    monkeypatch.delenv("PYDEFAULTS_LOG_LEVEL", raising=False)
