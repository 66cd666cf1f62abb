from __future__ import annotations

from painter.accounts import load_accounts
from painter.bot.scheduler import Scheduler
from painter.canvas.coords import CanvasMapper
from painter.common import log
from painter.config import ConfigurationError, Settings
from painter.engine.reconcile import Pacing, Reconciler
from painter.image.grid import check_palette, load_image
from painter.net.api import CanvasClient
from painter.net.session import build_session
from painter.state import RuntimeState
from painter.telegram.client import session_dead_notifier


def build_scheduler(settings: Settings) -> Scheduler:
    """Carga cuentas e imagen, valida la configuración y monta el planificador."""
    accounts = load_accounts(settings.ACCOUNTS_FILE)
    image = load_image(settings.IMAGE_FILE, skip_char=settings.SKIP_CHAR)
    check_palette(image, settings.PALETTE)

    mapper = CanvasMapper(settings.START_X, settings.START_Y,
                          settings.CANVAS_WIDTH, settings.CANVAS_HEIGHT)
    if not mapper.fits(image.width, image.height):
        raise ConfigurationError(
            f"La imagen {image.width}x{image.height} no cabe en el lienzo "
            f"{settings.CANVAS_WIDTH}x{settings.CANVAS_HEIGHT} desde ({settings.START_X}, {settings.START_Y})")

    session = build_session(settings.HTTP_RETRIES, settings.HTTP_RETRY_DELAY_SEC)
    client = CanvasClient(session, settings.API_BASE_URL,
                          timeout=settings.REQUEST_TIMEOUT_SEC, canvas_width=settings.CANVAS_WIDTH)
    reconciler = Reconciler(
        client, image, settings.PALETTE, mapper,
        pacing=Pacing(settings.PACING_BASE_SEC, settings.PACING_JITTER_SEC),
        swapped_compare=settings.SWAPPED_SKIP_COMPARE,
    )

    log.info("INIT", f"{len(accounts)} cuenta(s), imagen {image.width}x{image.height} "
                     f"en ({settings.START_X}, {settings.START_Y}), API={settings.API_BASE_URL}")
    return Scheduler(
        accounts, client, reconciler,
        state=RuntimeState(),
        cycle_sec=settings.CYCLE_SEC,
        on_session_dead=session_dead_notifier(settings.TG_BOT_TOKEN, settings.TG_CHAT_ID, session=session),
    )


def run_painter(settings: Settings) -> None:
    print("▶ Iniciando pintor de lienzo.")
    build_scheduler(settings).run_forever()
