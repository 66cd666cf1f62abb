from __future__ import annotations
import os
import json
import math
from pathlib import Path
from dataclasses import dataclass
from dotenv import load_dotenv


class ConfigurationError(Exception):
    """Configuración inválida: aborta el arranque, nunca se trata por píxel."""


DEFAULT_PALETTE = {
    "#": "#000000",
    ".": "#3690EA",
    "*": "#ffffff",
}

def _getenv_bool(name: str, default: bool) -> bool:
    v = os.getenv(name, str(default)).strip().lower()
    return v in ("1", "true", "yes", "y", "on")

def _getenv_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} debe ser entero (recibido {raw!r})")

def _getenv_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default)).strip()
    try:
        value = float(raw.replace(",", "."))
    except ValueError:
        raise ConfigurationError(f"{name} debe ser numérico (recibido {raw!r})")
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} debe ser finito (recibido {raw!r})")
    return value

def normalize_hex_color(s: str) -> str:
    """
    Convierte '#rrggbb' o 'rrggbb' a '#RRGGBB'.
    Lanza ConfigurationError si no es un color válido.
    """
    raw = (s or "").strip().lstrip("#")
    if len(raw) != 6:
        raise ConfigurationError(f"Color inválido: {s!r}")
    try:
        int(raw, 16)
    except ValueError:
        raise ConfigurationError(f"Color inválido: {s!r}")
    return "#" + raw.upper()

def parse_palette(raw: str | None) -> dict[str, str]:
    """PALETTE en JSON: {"código": "#rrggbb", ...}. Vacío -> paleta por defecto."""
    if raw is None or not raw.strip():
        data = DEFAULT_PALETTE
    else:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"PALETTE no es JSON válido: {e}")
        if not isinstance(data, dict) or not data:
            raise ConfigurationError("PALETTE debe ser un objeto JSON no vacío")

    palette = {}
    for code, color in data.items():
        if not isinstance(code, str) or len(code) != 1:
            raise ConfigurationError(f"Código de paleta inválido: {code!r} (un solo carácter)")
        palette[code] = normalize_hex_color(str(color))
    return palette

@dataclass(frozen=True)
class Settings:
    # servicio remoto
    API_BASE_URL: str
    REQUEST_TIMEOUT_SEC: float
    HTTP_RETRIES: int
    HTTP_RETRY_DELAY_SEC: float

    # entradas
    ACCOUNTS_FILE: str
    IMAGE_FILE: str

    # lienzo
    START_X: int
    START_Y: int
    CANVAS_WIDTH: int
    CANVAS_HEIGHT: int
    PALETTE: dict
    SKIP_CHAR: str
    SWAPPED_SKIP_COMPARE: bool

    # ritmo
    PACING_BASE_SEC: float
    PACING_JITTER_SEC: float
    CYCLE_SEC: float

    # telegram
    TG_BOT_TOKEN: str
    TG_CHAT_ID: str

def load_settings() -> Settings:
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
    else:
        load_dotenv()

    API_BASE_URL = os.getenv("API_BASE_URL", "https://notpx.app/api/v1").strip().rstrip("/")
    REQUEST_TIMEOUT_SEC = _getenv_float("REQUEST_TIMEOUT_SEC", 10.0)
    HTTP_RETRIES = _getenv_int("HTTP_RETRIES", 3)
    HTTP_RETRY_DELAY_SEC = _getenv_float("HTTP_RETRY_DELAY_SEC", 0.6)

    ACCOUNTS_FILE = os.getenv("ACCOUNTS_FILE", "data.txt").strip()
    IMAGE_FILE = os.getenv("IMAGE_FILE", "image.txt").strip()

    START_X = _getenv_int("START_X", 830)
    START_Y = _getenv_int("START_Y", 250)
    CANVAS_WIDTH = _getenv_int("CANVAS_WIDTH", 1000)
    CANVAS_HEIGHT = _getenv_int("CANVAS_HEIGHT", 1000)
    PALETTE = parse_palette(os.getenv("PALETTE"))
    # sin strip(): el espacio es el marcador por defecto
    SKIP_CHAR = os.getenv("SKIP_CHAR", " ")
    SWAPPED_SKIP_COMPARE = _getenv_bool("SWAPPED_SKIP_COMPARE", False)

    PACING_BASE_SEC = _getenv_float("PACING_BASE_SEC", 0.05)
    PACING_JITTER_SEC = _getenv_float("PACING_JITTER_SEC", 0.1)
    CYCLE_SEC = _getenv_float("CYCLE_SEC", 3600)

    TG_BOT_TOKEN = os.getenv("TG_BOT_TOKEN", "").strip()
    TG_CHAT_ID = os.getenv("TG_CHAT_ID", "").strip()

    if not API_BASE_URL:
        raise ConfigurationError("API_BASE_URL vacío")
    if len(SKIP_CHAR) != 1:
        raise ConfigurationError(f"SKIP_CHAR debe ser un solo carácter (recibido {SKIP_CHAR!r})")
    if SKIP_CHAR in PALETTE:
        raise ConfigurationError(f"SKIP_CHAR {SKIP_CHAR!r} no puede estar en la paleta")
    if START_X < 1 or START_Y < 1:
        raise ConfigurationError("START_X y START_Y empiezan en 1")
    if CANVAS_WIDTH <= 0 or CANVAS_HEIGHT <= 0:
        raise ConfigurationError("CANVAS_WIDTH y CANVAS_HEIGHT deben ser > 0")
    if HTTP_RETRIES < 0 or HTTP_RETRY_DELAY_SEC < 0:
        raise ConfigurationError("HTTP_RETRIES y HTTP_RETRY_DELAY_SEC no pueden ser negativos")
    if PACING_BASE_SEC < 0 or PACING_JITTER_SEC < 0 or CYCLE_SEC < 0:
        raise ConfigurationError("Los tiempos de ritmo/ciclo no pueden ser negativos")

    return Settings(
        API_BASE_URL=API_BASE_URL,
        REQUEST_TIMEOUT_SEC=REQUEST_TIMEOUT_SEC,
        HTTP_RETRIES=HTTP_RETRIES,
        HTTP_RETRY_DELAY_SEC=HTTP_RETRY_DELAY_SEC,
        ACCOUNTS_FILE=ACCOUNTS_FILE,
        IMAGE_FILE=IMAGE_FILE,
        START_X=START_X,
        START_Y=START_Y,
        CANVAS_WIDTH=CANVAS_WIDTH,
        CANVAS_HEIGHT=CANVAS_HEIGHT,
        PALETTE=PALETTE,
        SKIP_CHAR=SKIP_CHAR,
        SWAPPED_SKIP_COMPARE=SWAPPED_SKIP_COMPARE,
        PACING_BASE_SEC=PACING_BASE_SEC,
        PACING_JITTER_SEC=PACING_JITTER_SEC,
        CYCLE_SEC=CYCLE_SEC,
        TG_BOT_TOKEN=TG_BOT_TOKEN,
        TG_CHAT_ID=TG_CHAT_ID,
    )
