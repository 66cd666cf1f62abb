# estado mutable de la ejecución (solo en memoria)

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field

@dataclass
class RuntimeState:
    """
    Estado de la ejecución en curso:
    - cycle: número de ciclos completados
    - last_results: último PassResult por token de cuenta
      (el nombre visible puede repetirse, p. ej. varias 'Unknown')
    """
    cycle: int = 0
    last_results: dict = field(default_factory=dict)

    def record(self, account, result) -> None:
        self.last_results[account.token] = result

    def result_for(self, account):
        return self.last_results.get(account.token)

    def summary(self) -> Counter:
        return Counter(r.value for r in self.last_results.values())
