# cliente del lienzo remoto: lectura de color, pintado, claim y estado

from __future__ import annotations
from enum import Enum

import requests

from painter.canvas.coords import position_from_index
from painter.common import log

DEFAULT_COLOR = "#000000"


class Outcome(Enum):
    OK = "ok"
    UNAUTHORIZED = "unauthorized"        # 401 en cualquier endpoint
    ENERGY_EXHAUSTED = "energy"          # 400 en /repaint/start
    FAILED = "failed"                    # red, timeout, JSON roto, otro código


class CanvasClient:
    """
    Envuelve una llamada HTTP por operación y traduce el resultado a Outcome.
    Nunca propaga excepciones de transporte: los reintentos viven en la sesión
    (ver net/session.py) y en la repetición por cuenta/ciclo.
    """

    def __init__(self, session: requests.Session, base_url: str,
                 timeout: float = 10.0, canvas_width: int = 1000):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.canvas_width = canvas_width

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self, authorization: str) -> dict:
        return {"authorization": authorization}

    def get_color(self, pixel: int, authorization: str) -> tuple[Outcome, str | None]:
        """
        Color actual del píxel. (UNAUTHORIZED, None) si la sesión ha caducado;
        cualquier otro fallo devuelve (FAILED, DEFAULT_COLOR) para seguir adelante.
        """
        try:
            r = self.session.get(self._url(f"/image/get/{pixel}"),
                                 headers=self._headers(authorization), timeout=self.timeout)
            if r.status_code == 401:
                return Outcome.UNAUTHORIZED, None
            if not r.ok:
                log.error("NET", f"Error leyendo color de {pixel}: HTTP {r.status_code}")
                return Outcome.FAILED, DEFAULT_COLOR
            return Outcome.OK, str(r.json()["pixel"]["color"])
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            log.error("NET", f"Error leyendo color de {pixel}: {e}")
            return Outcome.FAILED, DEFAULT_COLOR

    def paint(self, pixel: int, color: str, authorization: str) -> Outcome:
        payload = {"pixelId": pixel, "newColor": color}
        try:
            r = self.session.post(self._url("/repaint/start"), json=payload,
                                  headers=self._headers(authorization), timeout=self.timeout)
        except requests.RequestException as e:
            log.error("PAINT", f"Fallo al pintar: {e}")
            return Outcome.FAILED

        if r.status_code == 400:
            log.warn("ENERGY", "Sin energía")
            return Outcome.ENERGY_EXHAUSTED
        if r.status_code == 401:
            return Outcome.UNAUTHORIZED
        if not r.ok:
            log.error("PAINT", f"Fallo al pintar: HTTP {r.status_code}")
            return Outcome.FAILED

        x, y = position_from_index(pixel, self.canvas_width)
        log.info("PAINT", f"Pintado: {x}, {y}")
        return Outcome.OK

    def claim(self, authorization: str) -> bool:
        """Best-effort: un fallo se registra y se devuelve False."""
        log.info("CLAIM", "Reclamando recursos")
        try:
            r = self.session.get(self._url("/mining/claim"),
                                 headers=self._headers(authorization), timeout=self.timeout)
        except requests.RequestException as e:
            log.error("CLAIM", f"No se pudieron reclamar recursos: {e}")
            return False
        if not r.ok:
            log.error("CLAIM", f"No se pudieron reclamar recursos: HTTP {r.status_code}")
            return False
        return True

    def mining_status(self, authorization: str) -> tuple[bool, dict | None]:
        """Saldo y estadísticas. Best-effort: (False, None) ante cualquier fallo."""
        try:
            r = self.session.get(self._url("/mining/status"),
                                 headers=self._headers(authorization), timeout=self.timeout)
            if r.status_code != 200:
                log.error("STATUS", f"No se pudo obtener el estado: HTTP {r.status_code}")
                return False, None
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            log.error("STATUS", f"Error obteniendo el estado: {e}")
            return False, None
        if not isinstance(data, dict):
            log.error("STATUS", "Respuesta de estado inesperada")
            return False, None
        log.info("STATUS", f"Saldo: {data.get('userBalance')}")
        return True, data
