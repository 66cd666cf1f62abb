# aviso opcional al operador por Telegram (sesiones caducadas)

from __future__ import annotations
from typing import Callable, Optional

import requests

from painter.common import log

API_URL = "https://api.telegram.org/bot{token}/{method}"


def enabled(token: str, chat_id: str) -> bool:
    return bool(token and chat_id)

def _describe(r: requests.Response) -> str:
    """Telegram responde {"ok": false, "description": "..."} en los errores."""
    try:
        return str(r.json().get("description") or r.text)
    except ValueError:
        return r.text


class TelegramNotifier:
    def __init__(self, token: str, chat_id: str,
                 session: Optional[requests.Session] = None, timeout: float = 15.0):
        self.token = token
        self.chat_id = chat_id
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, text: str) -> bool:
        try:
            r = self.session.post(API_URL.format(token=self.token, method="sendMessage"),
                                  data={"chat_id": self.chat_id, "text": text},
                                  timeout=self.timeout)
        except requests.RequestException as e:
            log.error("TG", f"Error de red/envío: {e}")
            return False
        if not r.ok:
            log.error("TG", f"sendMessage HTTP {r.status_code}: {_describe(r)}")
            return False
        return True

    def session_dead(self, account) -> None:
        text = (f"💀 Sesión caducada: {account.name}\n"
                f"Token terminado en …{account.token[-8:]}\n"
                "Sustituye la línea en el fichero de cuentas antes del próximo ciclo.")
        if not self.send(text):
            log.warn("TG", f"Aviso de sesión caducada NO enviado ({account.name})")


def session_dead_notifier(token: str, chat_id: str,
                          session: Optional[requests.Session] = None) -> Optional[Callable]:
    """Callback(account) para el planificador, o None si Telegram no está configurado."""
    if not enabled(token, chat_id):
        log.info("TG", "Deshabilitado: define TG_BOT_TOKEN y TG_CHAT_ID en .env")
        return None
    return TelegramNotifier(token, chat_id, session=session).session_dead
