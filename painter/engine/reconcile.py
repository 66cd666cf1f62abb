# motor de reconciliación: una pasada por cuenta sobre la imagen de referencia

from __future__ import annotations
import time
import random
from enum import Enum
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from painter.accounts import Account
from painter.canvas.coords import CanvasMapper
from painter.common import log
from painter.image.grid import ReferenceImage
from painter.net.api import Outcome


class Visit(Enum):
    PAINTED = "painted"
    SKIPPED = "skipped"
    ENERGY_EXHAUSTED = "energy"
    SESSION_INVALID = "session_invalid"
    TRANSIENT_ERROR = "transient"


class SkipReason(Enum):
    TRANSPARENT = "transparent"      # celda marcada como transparente
    SAME_COLOR = "same_color"        # el lienzo ya tiene el color


class PassResult(Enum):
    COMPLETED = "completed"
    SESSION_INVALID = "session_invalid"
    ENERGY_EXHAUSTED = "energy"
    FAILED = "failed"


# visita -> resultado de la pasada cuando la visita la termina
_TERMINAL = {
    Visit.SESSION_INVALID: PassResult.SESSION_INVALID,
    Visit.ENERGY_EXHAUSTED: PassResult.ENERGY_EXHAUSTED,
    Visit.TRANSIENT_ERROR: PassResult.FAILED,
}


@dataclass(frozen=True)
class Pacing:
    """Pausa entre peticiones: base + jitter uniforme."""
    base_sec: float = 0.05
    jitter_sec: float = 0.1

    def delay(self, rng: random.Random) -> float:
        return self.base_sec + rng.random() * self.jitter_sec


@dataclass
class PassReport:
    result: PassResult = PassResult.COMPLETED
    visited: int = 0
    painted: int = 0
    skipped: int = 0
    skip_reasons: Counter = field(default_factory=Counter)


def _same_color(a: Optional[str], b: Optional[str]) -> bool:
    if a is None or b is None:
        return False
    return a.strip().upper() == b.strip().upper()


class Reconciler:
    """
    Compara la imagen con el lienzo remoto y pinta lo que falta.
    Estrictamente secuencial: una petición en vuelo como máximo por cuenta.
    """

    def __init__(self, client, image: ReferenceImage, palette: dict[str, str],
                 mapper: CanvasMapper, pacing: Pacing = Pacing(),
                 rng: Optional[random.Random] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 swapped_compare: bool = False):
        self.client = client
        self.image = image
        self.palette = palette
        self.mapper = mapper
        self.pacing = pacing
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.swapped_compare = swapped_compare

    def domain(self) -> List[Tuple[int, int]]:
        """Todas las celdas (x, y) de la imagen en orden aleatorio nuevo."""
        cells = [(x, y) for y in range(self.image.height) for x in range(self.image.width)]
        self.rng.shuffle(cells)
        return cells

    def _compare_code(self, x: int, y: int) -> Optional[str]:
        if self.swapped_compare:
            return self.image.swapped_cell(x, y)
        return self.image.cell(x, y)

    def _skip_reason(self, x: int, y: int, color: Optional[str]) -> Optional[SkipReason]:
        if self.image.is_skip(x, y):
            return SkipReason.TRANSPARENT
        if _same_color(color, self.palette.get(self._compare_code(x, y))):
            return SkipReason.SAME_COLOR
        return None

    def visit(self, x: int, y: int, account: Account) -> Tuple[Visit, Optional[SkipReason]]:
        """Una coordenada: (Visit, motivo) donde el motivo solo acompaña a SKIPPED."""
        pixel = self.mapper.canvas_position(x, y)

        status, color = self.client.get_color(pixel, account.authorization)
        if status is Outcome.UNAUTHORIZED:
            return Visit.SESSION_INVALID, None

        reason = self._skip_reason(x, y, color)
        if reason is not None:
            ax, ay = self.mapper.absolute(x, y)
            log.info("SKIP", f"Saltado ({reason.value}): {ax}, {ay}")
            return Visit.SKIPPED, reason

        result = self.client.paint(pixel, self.palette[self.image.cell(x, y)], account.authorization)
        if result is Outcome.OK:
            return Visit.PAINTED, None
        if result is Outcome.UNAUTHORIZED:
            return Visit.SESSION_INVALID, None
        if result is Outcome.ENERGY_EXHAUSTED:
            return Visit.ENERGY_EXHAUSTED, None
        return Visit.TRANSIENT_ERROR, None

    def run(self, account: Account) -> PassReport:
        report = PassReport()
        for x, y in self.domain():
            self.sleep(self.pacing.delay(self.rng))
            outcome, reason = self.visit(x, y, account)
            report.visited += 1
            if outcome is Visit.PAINTED:
                report.painted += 1
            elif outcome is Visit.SKIPPED:
                report.skipped += 1
                report.skip_reasons[reason] += 1
            else:
                report.result = _TERMINAL[outcome]
                break
        return report
