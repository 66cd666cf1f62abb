# sesión HTTP compartida con reintentos de transporte

from __future__ import annotations
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

USER_AGENT = "Mozilla/5.0 (Linux; Android 13) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Mobile Safari/537.36"

class FixedDelayRetry(Retry):
    """Retry con pausa fija: backoff_factor son los segundos entre intentos."""

    def get_backoff_time(self) -> float:
        return float(self.backoff_factor) if self.history else 0.0

def build_retry(retries: int, delay_sec: float) -> FixedDelayRetry:
    # Solo errores de conexión/lectura; los códigos HTTP (400/401) tienen significado propio
    return FixedDelayRetry(
        total=retries,
        connect=retries,
        read=retries,
        status=0,
        other=0,
        allowed_methods=frozenset({"GET", "POST"}),
        backoff_factor=delay_sec,
        raise_on_status=False,
        respect_retry_after_header=False,
    )

def build_session(retries: int = 3, delay_sec: float = 0.6) -> requests.Session:
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=build_retry(retries, delay_sec))
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
        "Cache-Control": "no-cache",
    })
    return session
