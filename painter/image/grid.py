# imagen de referencia: rejilla de códigos de un carácter

from __future__ import annotations
from pathlib import Path
from dataclasses import dataclass

from painter.config import ConfigurationError

@dataclass(frozen=True)
class ReferenceImage:
    """
    Rejilla rectangular e inmutable. rows[y][x] es el código de la celda (x, y).
    skip_char marca las celdas transparentes (no se pintan).
    """
    rows: tuple[str, ...]
    skip_char: str = " "

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def cell(self, x: int, y: int) -> str:
        return self.rows[y][x]

    def swapped_cell(self, x: int, y: int) -> str | None:
        """rows[x][y]: lectura cruzada heredada; None si cae fuera de la rejilla."""
        if x >= self.height or y >= self.width:
            return None
        return self.rows[x][y]

    def is_skip(self, x: int, y: int) -> bool:
        return self.cell(x, y) == self.skip_char

    def codes(self) -> set[str]:
        """Códigos no transparentes presentes en la imagen."""
        found = set()
        for row in self.rows:
            found.update(row)
        found.discard(self.skip_char)
        return found

def from_lines(lines, skip_char: str = " ") -> ReferenceImage:
    """
    Construye la rejilla; las filas cortas se rellenan a la derecha con skip_char
    (los editores suelen recortar los espacios finales).
    """
    rows = [line.rstrip("\r\n") for line in lines]
    while rows and not rows[-1]:
        rows.pop()
    if not rows:
        raise ConfigurationError("La imagen de referencia está vacía")
    width = max(len(r) for r in rows)
    if width == 0:
        raise ConfigurationError("La imagen de referencia no tiene columnas")
    return ReferenceImage(rows=tuple(r.ljust(width, skip_char) for r in rows), skip_char=skip_char)

def load_image(path: str | Path, skip_char: str = " ") -> ReferenceImage:
    p = Path(path).expanduser()
    if not p.exists():
        raise ConfigurationError(f"No existe el fichero de imagen: {p}")
    return from_lines(p.read_text(encoding="utf-8").splitlines(), skip_char=skip_char)

def check_palette(image: ReferenceImage, palette: dict[str, str]) -> None:
    """Todo código no transparente debe tener color; si falta alguno, error fatal."""
    missing = sorted(image.codes() - set(palette))
    if missing:
        raise ConfigurationError(f"Códigos sin color en la paleta: {missing}")
