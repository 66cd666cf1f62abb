# cuentas: token init-data + nombre visible

from __future__ import annotations
import re
from pathlib import Path
from dataclasses import dataclass
from urllib.parse import unquote

from painter.config import ConfigurationError

UNKNOWN_USER = "Unknown"

_USERNAME_RE = re.compile(r'"username":"([^"]*)"')

def extract_username(init_data: str) -> str:
    """Nombre de usuario embebido en el init-data (URL-encoded); 'Unknown' si no aparece."""
    m = _USERNAME_RE.search(unquote(init_data or ""))
    if not m or not m.group(1):
        return UNKNOWN_USER
    return m.group(1)

@dataclass(frozen=True)
class Account:
    token: str
    name: str = UNKNOWN_USER

    @property
    def authorization(self) -> str:
        return f"initData {self.token}"

    @classmethod
    def from_token(cls, token: str) -> "Account":
        token = token.strip()
        return cls(token=token, name=extract_username(token))

def load_accounts(filename: str | Path) -> list[Account]:
    """Una cuenta por línea; las líneas en blanco se ignoran."""
    path = Path(filename).expanduser()
    if not path.exists():
        raise ConfigurationError(f"No existe el fichero de cuentas: {path}")
    accounts = [Account.from_token(line)
                for line in path.read_text(encoding="utf-8").splitlines()
                if line.strip()]
    if not accounts:
        raise ConfigurationError(f"El fichero de cuentas está vacío: {path}")
    return accounts
