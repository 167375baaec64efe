import importlib
from decimal import Decimal

import pytest


@pytest.mark.usefixtures("reset_config_module")
def test_vat_rate_and_database_url_from_environment(monkeypatch):
    monkeypatch.setenv("VAT_RATE", "0.12")
    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/matriculas")
    monkeypatch.setenv("SQLALCHEMY_ECHO", "yes")

    config_module = importlib.import_module("config")
    importlib.reload(config_module)

    assert config_module.Config.VAT_RATE == Decimal("0.12")
    assert config_module.Config.SQLALCHEMY_DATABASE_URI == "postgresql://localhost/matriculas"
    assert config_module.Config.SQLALCHEMY_ECHO is True


@pytest.mark.usefixtures("reset_config_module")
def test_defaults():
    config_module = importlib.import_module("config")
    importlib.reload(config_module)

    assert config_module.Config.VAT_RATE == Decimal("0.15")
    assert config_module.Config.SQLALCHEMY_DATABASE_URI.startswith("sqlite:///")
    assert config_module.Config.LOG_LEVEL == "INFO"


@pytest.fixture
def reset_config_module(monkeypatch):
    for key in ["VAT_RATE", "DATABASE_URL", "SQLALCHEMY_DATABASE_URI", "SQLALCHEMY_ECHO", "LOG_LEVEL"]:
        monkeypatch.delenv(key, raising=False)
    import sys

    sys.modules.pop("config", None)
    yield
    sys.modules.pop("config", None)
