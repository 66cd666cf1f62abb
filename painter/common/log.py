# salida de eventos por consola: [HH:MM:SS] NIVEL [TAG] mensaje

from __future__ import annotations
import sys
from datetime import datetime

def _stamp() -> str:
    return datetime.now().strftime("%H:%M:%S")

def _emit(level: str, tag: str, message: str, stream) -> None:
    print(f"[{_stamp()}] {level:<5} [{tag}] {message}", file=stream, flush=True)

def info(tag: str, message: str) -> None:
    _emit("INFO", tag, message, sys.stdout)

def warn(tag: str, message: str) -> None:
    _emit("WARN", tag, message, sys.stderr)

def error(tag: str, message: str) -> None:
    _emit("ERROR", tag, message, sys.stderr)
