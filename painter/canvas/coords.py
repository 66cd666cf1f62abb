# traducción de coordenadas imagen <-> índice lineal del lienzo

from __future__ import annotations
from dataclasses import dataclass

CANVAS_WIDTH = 1000
CANVAS_HEIGHT = 1000

def pixel_index(x: int, y: int, width: int = CANVAS_WIDTH) -> int:
    """Índice lineal del lienzo, base 1: y * width + x + 1."""
    return y * width + x + 1

def position_from_index(pixel: int, width: int = CANVAS_WIDTH) -> tuple[int, int]:
    """
    Inversa aproximada de pixel_index (sin compensar el +1).
    Solo para logs: position_from_index(pixel_index(x, y) - 1) == (x, y).
    """
    return pixel % width, pixel // width

@dataclass(frozen=True)
class CanvasMapper:
    """Ancla la imagen de referencia en (origin_x, origin_y) del lienzo."""
    origin_x: int
    origin_y: int
    width: int = CANVAS_WIDTH
    height: int = CANVAS_HEIGHT

    def canvas_position(self, x: int, y: int) -> int:
        return pixel_index(self.origin_x + x - 1, self.origin_y + y - 1, self.width)

    def absolute(self, x: int, y: int) -> tuple[int, int]:
        """Coordenada absoluta (x, y) en el lienzo para una celda de la imagen."""
        return self.origin_x + x - 1, self.origin_y + y - 1

    def position(self, pixel: int) -> tuple[int, int]:
        return position_from_index(pixel, self.width)

    def fits(self, image_width: int, image_height: int) -> bool:
        x0, y0 = self.absolute(0, 0)
        x1, y1 = self.absolute(image_width - 1, image_height - 1)
        return x0 >= 0 and y0 >= 0 and x1 < self.width and y1 < self.height
