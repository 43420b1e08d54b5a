import pytest


@pytest.fixture(autouse=True)
def _no_config_override(monkeypatch):
    monkeypatch.delenv("PLUMAR_CONFIG", raising=False)
