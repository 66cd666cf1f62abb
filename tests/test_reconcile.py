"""Tests del motor de reconciliación con un cliente falso.

Ejecutar con: pytest tests/test_reconcile.py -v
"""

import random

import pytest

from painter.accounts import Account
from painter.canvas.coords import CanvasMapper
from painter.engine.reconcile import Pacing, PassResult, Reconciler, SkipReason, Visit
from painter.image.grid import from_lines
from painter.net.api import DEFAULT_COLOR, Outcome

PALETTE = {"#": "#000000", ".": "#3690EA", "*": "#FFFFFF"}
ACCOUNT = Account(token="tok", name="tester")


class FakeClient:
    """Lienzo en memoria; registra cada llamada remota en orden."""

    def __init__(self, colors=None, default="#FFFFFF", read_script=None, paint_script=None):
        self.colors = dict(colors or {})
        self.default = default
        self.read_script = list(read_script or [])
        self.paint_script = list(paint_script or [])
        self.calls = []

    def get_color(self, pixel, authorization):
        self.calls.append(("read", pixel))
        if self.read_script:
            return self.read_script.pop(0)
        return Outcome.OK, self.colors.get(pixel, self.default)

    def paint(self, pixel, color, authorization):
        self.calls.append(("paint", pixel, color))
        outcome = self.paint_script.pop(0) if self.paint_script else Outcome.OK
        if outcome is Outcome.OK:
            self.colors[pixel] = color
        return outcome

    @property
    def reads(self):
        return [c for c in self.calls if c[0] == "read"]

    @property
    def paints(self):
        return [c for c in self.calls if c[0] == "paint"]


class FakeSleeper:
    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


def make_engine(rows, client, swapped=False, seed=7):
    sleeper = FakeSleeper()
    engine = Reconciler(
        client, from_lines(rows), PALETTE, CanvasMapper(11, 21, 100, 100),
        pacing=Pacing(0.05, 0.1), rng=random.Random(seed), sleep=sleeper,
        swapped_compare=swapped,
    )
    return engine, sleeper


class TestDomain:
    """Permutación de coordenadas."""

    def test_full_coverage_without_repeats(self):
        """Cada celda aparece exactamente una vez."""
        engine, _ = make_engine(["#####", "#####", "#####"], FakeClient())
        cells = engine.domain()
        assert len(cells) == 15
        assert set(cells) == {(x, y) for x in range(5) for y in range(3)}

    def test_fresh_order_each_call(self):
        """Cada pasada baraja de nuevo."""
        engine, _ = make_engine(["#" * 10] * 10, FakeClient())
        assert engine.domain() != engine.domain()


class TestPass:
    """Una pasada completa."""

    def test_paints_every_mismatch(self):
        """Sobre un lienzo blanco se pinta todo lo que no es blanco."""
        client = FakeClient()
        engine, _ = make_engine(["#.", "*#"], client)
        report = engine.run(ACCOUNT)
        assert report.result is PassResult.COMPLETED
        assert (report.visited, report.painted, report.skipped) == (4, 3, 1)
        assert len(client.reads) == 4

    def test_each_pixel_visited_once(self):
        """Ninguna posición se lee dos veces en la misma pasada."""
        client = FakeClient()
        engine, _ = make_engine(["#.*#", ".*#.", "*#.*"], client)
        engine.run(ACCOUNT)
        pixels = [c[1] for c in client.reads]
        assert len(pixels) == len(set(pixels)) == 12

    def test_paints_mapped_position_and_palette_color(self):
        """El pintado usa la posición anclada y el color de la paleta."""
        client = FakeClient()
        engine, _ = make_engine(["."], client)
        engine.run(ACCOUNT)
        mapper = CanvasMapper(11, 21, 100, 100)
        assert client.paints == [("paint", mapper.canvas_position(0, 0), "#3690EA")]

    def test_pacing_before_each_request(self):
        """Una pausa por coordenada, dentro de base + jitter."""
        client = FakeClient()
        engine, sleeper = make_engine(["##", "##"], client)
        engine.run(ACCOUNT)
        assert len(sleeper.delays) == 4
        assert all(0.05 <= d <= 0.15 for d in sleeper.delays)

    def test_all_skip_issues_no_paint(self):
        """Una imagen transparente no pinta nada."""
        client = FakeClient()
        engine, _ = make_engine(["   ", "   "], client)
        report = engine.run(ACCOUNT)
        assert client.paints == []
        assert report.painted == 0
        assert report.skipped == 6
        assert report.result is PassResult.COMPLETED

    def test_matching_color_is_skipped(self):
        """Si el lienzo ya tiene el color no se pinta (sin distinguir mayúsculas)."""
        client = FakeClient(default="#3690ea")
        engine, _ = make_engine(["..", ".."], client)
        report = engine.run(ACCOUNT)
        assert client.paints == []
        assert report.skipped == 4

    def test_failed_read_proceeds_with_default_color(self):
        """Una lectura fallida cuenta como negro y el motor sigue."""
        client = FakeClient(read_script=[(Outcome.FAILED, DEFAULT_COLOR)])
        engine, _ = make_engine(["#"], client)
        report = engine.run(ACCOUNT)
        assert client.paints == []
        assert report.result is PassResult.COMPLETED


class TestTermination:
    """Condiciones de parada."""

    def test_unauthorized_first_read(self):
        """401 en la primera lectura: una sola visita y sesión inválida."""
        client = FakeClient(read_script=[(Outcome.UNAUTHORIZED, None)])
        engine, sleeper = make_engine(["####", "####"], client)
        report = engine.run(ACCOUNT)
        assert report.result is PassResult.SESSION_INVALID
        assert report.visited == 1
        assert client.calls == [client.reads[0]]
        assert len(sleeper.delays) == 1

    def test_unauthorized_on_paint(self):
        """401 al pintar también termina la pasada."""
        client = FakeClient(paint_script=[Outcome.UNAUTHORIZED])
        engine, _ = make_engine(["###"], client)
        report = engine.run(ACCOUNT)
        assert report.result is PassResult.SESSION_INVALID
        assert len(client.calls) == 2

    def test_energy_on_third_paint(self):
        """Sin energía en el tercer pintado: dos pintados, un intento y nada más."""
        client = FakeClient(paint_script=[Outcome.OK, Outcome.OK, Outcome.ENERGY_EXHAUSTED])
        engine, _ = make_engine(["#####", "#####"], client)
        report = engine.run(ACCOUNT)
        assert report.result is PassResult.ENERGY_EXHAUSTED
        assert report.painted == 2
        assert report.visited == 3
        assert len(client.paints) == 3
        assert len(client.calls) == 6
        assert client.calls[-1][0] == "paint"

    def test_generic_paint_failure_stops(self):
        """Un fallo genérico al pintar detiene la pasada sin ser fatal."""
        client = FakeClient(paint_script=[Outcome.FAILED])
        engine, _ = make_engine(["##", "##"], client)
        report = engine.run(ACCOUNT)
        assert report.result is PassResult.FAILED
        assert len(client.paints) == 1


class TestSkipComparison:
    """Comparación cruzada heredada (x, y) vs (y, x)."""

    ROWS = ["#.", "##"]

    def _client_with(self, color_at_1_0):
        mapper = CanvasMapper(11, 21, 100, 100)
        return FakeClient(colors={mapper.canvas_position(1, 0): color_at_1_0})

    def test_consistent_indexing(self):
        """Por defecto se compara con la celda que se pinta."""
        client = self._client_with("#3690EA")
        engine, _ = make_engine(self.ROWS, client)
        assert engine.visit(1, 0, ACCOUNT) == (Visit.SKIPPED, SkipReason.SAME_COLOR)

    def test_swapped_indexing_repaints(self):
        """Con la lectura cruzada, (1, 0) se compara con rows[1][0] = '#' y se pinta."""
        client = self._client_with("#3690EA")
        engine, _ = make_engine(self.ROWS, client, swapped=True)
        assert engine.visit(1, 0, ACCOUNT) == (Visit.PAINTED, None)
        assert client.paints[0][2] == "#3690EA"

    def test_swapped_indexing_skips_on_cross_match(self):
        """Con la lectura cruzada, un negro en (1, 0) se salta."""
        client = self._client_with("#000000")
        engine, _ = make_engine(self.ROWS, client, swapped=True)
        assert engine.visit(1, 0, ACCOUNT) == (Visit.SKIPPED, SkipReason.SAME_COLOR)

    def test_swapped_outside_grid_paints(self):
        """Fuera de la rejilla cruzada nunca coincide."""
        client = FakeClient(default="#000000")
        engine, _ = make_engine(["###"], client, swapped=True)
        assert engine.visit(2, 0, ACCOUNT) == (Visit.PAINTED, None)


class TestSkipReasons:
    """Motivo de cada salto."""

    def test_transparent_cell(self, capsys):
        """Una celda transparente se salta por transparencia y se registra."""
        client = FakeClient()
        engine, _ = make_engine([" "], client)
        assert engine.visit(0, 0, ACCOUNT) == (Visit.SKIPPED, SkipReason.TRANSPARENT)
        assert "[SKIP] Saltado (transparent): 10, 20" in capsys.readouterr().out

    def test_transparent_wins_over_colour(self):
        """Aunque el color coincida con algo, una celda transparente es TRANSPARENT."""
        client = FakeClient(default="#000000")
        engine, _ = make_engine([" "], client)
        assert engine.visit(0, 0, ACCOUNT) == (Visit.SKIPPED, SkipReason.TRANSPARENT)

    def test_same_colour(self, capsys):
        """Un píxel ya correcto se salta por color y se registra."""
        client = FakeClient(default="#000000")
        engine, _ = make_engine(["#"], client)
        assert engine.visit(0, 0, ACCOUNT) == (Visit.SKIPPED, SkipReason.SAME_COLOR)
        assert "[SKIP] Saltado (same_color): 10, 20" in capsys.readouterr().out

    def test_report_counts_reasons(self):
        """El informe de la pasada separa los saltos por motivo."""
        client = FakeClient(default="#FFFFFF")
        engine, _ = make_engine(["* ", "  "], client)
        report = engine.run(ACCOUNT)
        assert report.skipped == 4
        assert report.skip_reasons == {SkipReason.TRANSPARENT: 3, SkipReason.SAME_COLOR: 1}

    def test_paint_is_not_a_skip(self):
        """Un pintado no lleva motivo."""
        client = FakeClient()
        engine, _ = make_engine(["#"], client)
        assert engine.visit(0, 0, ACCOUNT) == (Visit.PAINTED, None)
