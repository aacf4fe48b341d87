"""Testes do carregamento de configuração (config/settings.py)."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import REQUIRED_VALUES, make_config

from menubot.config.settings import (
    PAYMENT_CANCEL_PATH,
    PAYMENT_NOTIFY_PATH,
    PAYMENT_RETURN_PATH,
    REQUIRED_VARIABLES,
    load_config,
)
from menubot.errors import ConfigurationError, MissingEnvironmentError, StartupError


def _env_values() -> dict[str, str]:
    return {name: REQUIRED_VALUES[attr] for name, attr in REQUIRED_VARIABLES.items()}


class TestRequiredVariables:
    """Variáveis obrigatórias ausentes impedem o startup."""

    def test_loads_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name, value in _env_values().items():
            monkeypatch.setenv(name, value)

        config = load_config(_env_file=None)

        assert config.host_number == REQUIRED_VALUES["host_number"]
        assert config.home_base_url == REQUIRED_VALUES["home_base_url"]
        assert config.merchant_id == REQUIRED_VALUES["merchant_id"]
        assert config.pf_host == REQUIRED_VALUES["pf_host"]
        assert config.missing_required() == []

    @pytest.mark.parametrize("missing", list(REQUIRED_VARIABLES))
    def test_each_missing_variable_is_named(
        self, monkeypatch: pytest.MonkeyPatch, missing: str
    ) -> None:
        for name, value in _env_values().items():
            if name != missing:
                monkeypatch.setenv(name, value)

        with pytest.raises(MissingEnvironmentError) as exc_info:
            load_config(_env_file=None)

        assert exc_info.value.names == (missing,)
        assert str(exc_info.value) == f"{missing} environment variable does not exist"
        assert exc_info.value.stage == "config"

    def test_empty_value_counts_as_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name, value in _env_values().items():
            monkeypatch.setenv(name, value)
        monkeypatch.setenv("PASSPHRASE", "")

        with pytest.raises(MissingEnvironmentError) as exc_info:
            load_config(_env_file=None)

        assert exc_info.value.names == ("PASSPHRASE",)

    def test_all_missing_are_listed_in_declaration_order(self) -> None:
        with pytest.raises(MissingEnvironmentError) as exc_info:
            load_config(_env_file=None)

        assert exc_info.value.names == tuple(REQUIRED_VARIABLES)
        assert "PFHOST" in str(exc_info.value)
        assert isinstance(exc_info.value, StartupError)

    def test_reads_app_env_file_from_working_directory(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        lines = [f"{name}={value}" for name, value in _env_values().items()]
        (tmp_path / "app.env").write_text("\n".join(lines) + "\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config.database_url == REQUIRED_VALUES["database_url"]
        assert config.passphrase == REQUIRED_VALUES["passphrase"]

    def test_environment_overrides_app_env_file(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        lines = [f"{name}={value}" for name, value in _env_values().items()]
        (tmp_path / "app.env").write_text("\n".join(lines) + "\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOST_NUMBER", "27829999999")

        assert load_config().host_number == "27829999999"


class TestTunables:
    """Parâmetros opcionais e validações."""

    def test_defaults(self) -> None:
        config = make_config()

        assert config.catalogue_id == "Pig"
        assert config.pricelist_preamble == "All fertilizer quoted per gram."
        assert config.item_name_prefix == "Order"
        assert config.stale_message_seconds == 10
        assert config.test_mode is False
        assert config.auto_increment is False
        assert config.http_port == 8080

    def test_invalid_log_format_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="LOG_FORMAT"):
            make_config(log_format="xml")

    def test_non_positive_timeout_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="SEND_TIMEOUT_SECONDS"):
            make_config(send_timeout_seconds=0)

    def test_home_base_url_must_be_http(self) -> None:
        with pytest.raises(ConfigurationError, match="HOMEBASEURL"):
            make_config(home_base_url="shop.example.com")

    def test_wrong_type_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="HTTP_PORT"):
            make_config(http_port="not-a-port")

    def test_config_is_immutable(self) -> None:
        config = make_config()
        with pytest.raises(Exception):  # noqa: B017
            config.host_number = "other"  # type: ignore[misc]


class TestDerivedValues:
    def test_public_url_strips_trailing_slash(self) -> None:
        config = make_config(home_base_url="https://shop.example.com/")

        assert config.public_url(PAYMENT_RETURN_PATH) == "https://shop.example.com/payment_return"
        assert config.public_url(PAYMENT_CANCEL_PATH).endswith("/payment_canceled")
        assert config.public_url(PAYMENT_NOTIFY_PATH).endswith("/payment_notify")

    def test_templates_dir_under_working_dir(self, tmp_path: Path) -> None:
        config = make_config(working_dir=tmp_path)
        assert config.templates_dir == tmp_path / "templates"
