# src/actionflow/core/telemetry/event_log.py
"""
Event Log: registro estruturado dos spans de actions.

Este módulo define o `EventLog`, o registrador canônico de observabilidade
do ActionFlow. Ele se anexa a um `TelemetryBus` e converte cada evento de
span em um registro estruturado, ordenado e serializável.

Princípios fundamentais:
    - Logs são eventos estruturados, não strings livres
    - A ordem do log reflete a ordem de emissão
    - UTC é o timezone canônico de todos os timestamps
    - O log é serializável e reconstruível (round-trip JSON)

Formato de cada registro:
    {
        "event": "actionflow.action.stop",
        "timestamp": "<ISO 8601 UTC>",
        "measurements": {...},
        "metadata": {...},
    }

Limites explícitos:
    - Não emite eventos
    - Não decide políticas de execução
    - Não persiste automaticamente (ver `save_event_log`)
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .bus import EventName, TelemetryBus, span_events


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class EventLog:
    """
    Registro ordenado de eventos de instrumentação.

    Decisões arquiteturais:
        - Cada evento recebido vira exatamente um registro
        - Registros não são reordenados nem deduplicados
        - A escrita é protegida por lock (invocações concorrentes)
    """

    events: List[Dict[str, Any]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    # -----------------------------
    # Integração com o barramento
    # -----------------------------
    def attach(self, bus: TelemetryBus, prefix: Sequence[str], handler_id: Optional[str] = None) -> str:
        hid = handler_id or f"event-log-{id(self)}"
        bus.attach(hid, span_events(prefix), self.handle)
        return hid

    def handle(self, event: EventName, measurements: Dict[str, Any], metadata: Dict[str, Any], _config: Any = None) -> None:
        record = {
            "event": ".".join(event),
            "timestamp": _iso_now(),
            "measurements": dict(measurements),
            "metadata": dict(metadata),
        }
        with self._lock:
            self.events.append(record)

    # -----------------------------
    # Consulta
    # -----------------------------
    def named(self, suffix: str) -> List[Dict[str, Any]]:
        """Registros cujo nome termina em `.suffix` (ex.: "stop")."""
        with self._lock:
            return [e for e in self.events if e["event"].endswith("." + suffix)]

    # -----------------------------
    # Serialização
    # -----------------------------
    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {"events": [dict(e) for e in self.events]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventLog":
        return cls(events=[dict(e) for e in (data.get("events", []) or [])])


def save_event_log(log: EventLog, path: Path) -> None:
    """
    Persiste o Event Log em JSON determinístico (UTF-8, chaves ordenadas).

    Valores não serializáveis na metadata (ex.: exceções, objetos de
    domínio) são gravados pela sua representação textual.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(log.to_dict(), ensure_ascii=False, indent=2, sort_keys=True, default=str),
        encoding="utf-8",
    )


def load_event_log(path: Path) -> EventLog:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return EventLog.from_dict(data)
