from decimal import Decimal

from planner.core.config import load_settings
from planner.engine.financial_engine import FinancialEngine

_ENV_KEYS = ("APP_ENV", "LOG_LEVEL", "INFLATION_RATE", "ROUNDING_CURRENCY_DECIMALS")


def _clear_env(monkeypatch):
    for k in _ENV_KEYS:
        monkeypatch.delenv(k, raising=False)


def test_defaults_without_config_file(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    s = load_settings(str(tmp_path / "missing.yaml"))
    assert s.env == "dev"
    assert s.log_level == "INFO"
    assert s.inflation_rate == Decimal("0.03")
    assert s.rounding_currency_decimals == 2


def test_yaml_values_keep_decimal_exactness(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    cfg = tmp_path / "config.yaml"
    cfg.write_text("app:\n  env: prod\n  log_level: debug\nengine:\n  inflation_rate: 0.025\n", encoding="utf-8")

    s = load_settings(str(cfg))
    assert s.env == "prod"
    assert s.log_level == "DEBUG"
    assert s.inflation_rate == Decimal("0.025")


def test_env_overrides_yaml_but_empty_env_does_not(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    cfg = tmp_path / "config.yaml"
    cfg.write_text("engine:\n  inflation_rate: '0.025'\n", encoding="utf-8")

    monkeypatch.setenv("INFLATION_RATE", "0.04")
    assert load_settings(str(cfg)).inflation_rate == Decimal("0.04")

    monkeypatch.setenv("INFLATION_RATE", "  ")
    assert load_settings(str(cfg)).inflation_rate == Decimal("0.025")


def test_engine_from_settings(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("INFLATION_RATE", "0.05")
    engine = FinancialEngine.from_settings(load_settings(str(tmp_path / "missing.yaml")))
    assert engine.inflation_rate == Decimal("0.05")
