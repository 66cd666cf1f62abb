"""Tests de carga de cuentas."""

from urllib.parse import quote

import pytest

from painter.accounts import UNKNOWN_USER, Account, extract_username, load_accounts
from painter.config import ConfigurationError

TOKEN = "query_id=AAA&user=" + quote('{"id":1,"first_name":"A","username":"pixel_fan"}') + "&auth_date=1&hash=abc"


class TestExtractUsername:
    """Nombre visible a partir del init-data."""

    def test_url_encoded(self):
        """El campo username se decodifica."""
        assert extract_username(TOKEN) == "pixel_fan"

    def test_missing(self):
        """Sin username: Unknown."""
        assert extract_username("query_id=AAA&auth_date=1") == UNKNOWN_USER

    def test_empty(self):
        """Token vacío: Unknown."""
        assert extract_username("") == UNKNOWN_USER


class TestAccount:
    """Cabecera de autorización."""

    def test_authorization_prefix(self):
        """La cabecera lleva el prefijo initData."""
        assert Account.from_token(f"  {TOKEN}\n").authorization == f"initData {TOKEN}"

    def test_name_from_token(self):
        """from_token extrae el nombre."""
        assert Account.from_token(TOKEN).name == "pixel_fan"


class TestLoadAccounts:
    """Fichero de credenciales."""

    def test_blank_lines_ignored(self, tmp_path):
        """Una cuenta por línea no vacía, en orden."""
        p = tmp_path / "data.txt"
        p.write_text(f"{TOKEN}\n\n   \nquery_id=B\n", encoding="utf-8")
        accounts = load_accounts(p)
        assert [a.name for a in accounts] == ["pixel_fan", UNKNOWN_USER]
        assert accounts[1].token == "query_id=B"

    def test_missing_file(self, tmp_path):
        """Fichero inexistente: error de configuración."""
        with pytest.raises(ConfigurationError):
            load_accounts(tmp_path / "data.txt")

    def test_empty_file(self, tmp_path):
        """Fichero sin cuentas: error de configuración."""
        p = tmp_path / "data.txt"
        p.write_text("\n\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_accounts(p)
