# planificador multi-cuenta: un ciclo = una pasada por cuenta + espera hasta CYCLE_SEC

from __future__ import annotations
import time
from typing import Callable, Optional, Sequence

from painter.accounts import Account
from painter.common import log
from painter.engine.reconcile import PassReport, PassResult, Reconciler
from painter.state import RuntimeState

CYCLE_SEC = 3600.0

def compute_sleep(elapsed: float, target: float = CYCLE_SEC) -> float:
    """Lo que falta para completar el ciclo; nunca negativo."""
    return max(target - elapsed, 0.0)

class Scheduler:
    def __init__(self, accounts: Sequence[Account], client, reconciler: Reconciler,
                 state: Optional[RuntimeState] = None, cycle_sec: float = CYCLE_SEC,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep,
                 on_session_dead: Optional[Callable[[Account], None]] = None):
        self.accounts = list(accounts)
        self.client = client
        self.reconciler = reconciler
        self.state = state or RuntimeState()
        self.cycle_sec = cycle_sec
        self.clock = clock
        self.sleep = sleep
        self.on_session_dead = on_session_dead

    def process_account(self, account: Account) -> PassReport:
        log.info("ACCOUNT", f"- - - Iniciando sesión para la cuenta: {account.name} - - -")

        # best-effort: el resultado se descarta a propósito
        _ok, _status = self.client.mining_status(account.authorization)
        _claimed = self.client.claim(account.authorization)

        try:
            report = self.reconciler.run(account)
        except Exception as e:
            log.error("NET", f"Error de red: {e}")
            report = PassReport(result=PassResult.FAILED)

        if report.result is PassResult.SESSION_INVALID:
            log.error("DEAD", f"Sesión caducada :| ({account.name})")
            print(account.authorization, flush=True)
            if self.on_session_dead:
                self.on_session_dead(account)

        log.info("ACCOUNT", f"{account.name}: {report.result.value} "
                            f"(visitados={report.visited} pintados={report.painted} saltados={report.skipped})")
        self.state.record(account, report.result)
        return report

    def run_cycle(self) -> float:
        """Procesa todas las cuentas en orden y rellena el ciclo. Devuelve lo dormido."""
        started = self.clock()
        for account in self.accounts:
            self.process_account(account)

        self.state.cycle += 1
        summary = ", ".join(f"{k}={v}" for k, v in sorted(self.state.summary().items()))
        log.info("CYCLE", f"Ciclo #{self.state.cycle} terminado: {summary}")

        wait = compute_sleep(self.clock() - started, self.cycle_sec)
        if wait > 0:
            log.info("CYCLE", f"Durmiendo {int(wait // 60)} minutos..")
            self.sleep(wait)
        else:
            log.info("CYCLE", "No hace falta dormir")
        return wait

    def run_forever(self) -> None:
        while True:
            self.run_cycle()
