# src/actionflow/core/telemetry/bus.py
"""
Transporte de instrumentação em processo.

Este módulo define o `TelemetryBus`, o barramento de eventos utilizado
pelo ActionFlow para emitir spans de execução de actions.

Modelo de eventos:
    - Nomes de evento são tuplas: `(*prefixo, "start" | "stop" | "exception")`
    - Cada evento carrega `measurements` (números) e `metadata` (mapa)
    - `span` emite start, executa o corpo e emite stop ou exception

Decisões arquiteturais:
    - O barramento é um objeto explícito, não um estado global
    - Um handler que falha é desanexado e registrado em `handler_failures`;
      a falha nunca atinge a action instrumentada
    - Anexar/desanexar é seguro entre threads; a emissão lê um snapshot

Limites explícitos:
    - Não persiste eventos (ver `EventLog`)
    - Não agrega métricas
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

EventName = Tuple[str, ...]
Handler = Callable[[EventName, Dict[str, Any], Dict[str, Any], Any], None]


def _elapsed_us(start_ns: int, end_ns: int) -> int:
    return max(0, (end_ns - start_ns) // 1000)


class TelemetryBus:
    """Barramento de eventos de instrumentação (handlers por nome de evento)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: Dict[str, Tuple[Tuple[EventName, ...], Handler, Any]] = {}
        self.handler_failures: List[Dict[str, Any]] = []

    # -----------------------------
    # Handlers
    # -----------------------------
    def attach(
        self,
        handler_id: str,
        event_names: Iterable[Sequence[str]],
        handler: Handler,
        config: Any = None,
    ) -> None:
        if not isinstance(handler_id, str) or not handler_id.strip():
            raise ValueError("handler_id must be a non-empty string")
        if not callable(handler):
            raise TypeError("handler must be callable")
        names = tuple(tuple(n) for n in event_names)
        with self._lock:
            if handler_id in self._handlers:
                raise ValueError(f"Duplicate handler id: {handler_id}")
            self._handlers[handler_id] = (names, handler, config)

    def detach(self, handler_id: str) -> bool:
        with self._lock:
            return self._handlers.pop(handler_id, None) is not None

    def handler_ids(self) -> List[str]:
        with self._lock:
            return list(self._handlers)

    # -----------------------------
    # Emissão
    # -----------------------------
    def execute(
        self,
        event_name: Sequence[str],
        measurements: Mapping[str, Any],
        metadata: Mapping[str, Any],
    ) -> None:
        name = tuple(event_name)
        with self._lock:
            targets = [
                (hid, handler, config)
                for hid, (names, handler, config) in self._handlers.items()
                if name in names
            ]

        for hid, handler, config in targets:
            try:
                handler(name, dict(measurements), dict(metadata), config)
            except Exception as e:
                # handler com defeito é desanexado
                self.detach(hid)
                with self._lock:
                    self.handler_failures.append(
                        {
                            "handler_id": hid,
                            "event": name,
                            "exception_type": e.__class__.__name__,
                        }
                    )

    def span(
        self,
        prefix: Sequence[str],
        start_metadata: Mapping[str, Any],
        body: Callable[[], Tuple[Any, Mapping[str, Any]]],
    ) -> Any:
        """
        Executa `body` entre os eventos start e stop/exception.

        `body` devolve `(resultado, metadata_de_stop)`. Se `body` levantar,
        o evento exception é emitido com a duração medida e a exceção é
        relançada ao chamador.
        """
        prefix = tuple(prefix)
        start_ns = time.monotonic_ns()
        self.execute(
            prefix + ("start",),
            {"monotonic_time": start_ns, "system_time": time.time_ns()},
            start_metadata,
        )

        try:
            result, stop_metadata = body()
        except Exception as e:
            end_ns = time.monotonic_ns()
            exc_metadata = dict(start_metadata)
            exc_metadata.update(
                {
                    "kind": "error",
                    "reason": e,
                    "exception_type": e.__class__.__name__,
                }
            )
            self.execute(
                prefix + ("exception",),
                {"duration": _elapsed_us(start_ns, end_ns), "monotonic_time": end_ns},
                exc_metadata,
            )
            raise

        end_ns = time.monotonic_ns()
        self.execute(
            prefix + ("stop",),
            {"duration": _elapsed_us(start_ns, end_ns), "monotonic_time": end_ns},
            stop_metadata,
        )
        return result


def span_events(prefix: Sequence[str]) -> List[EventName]:
    """Os três nomes de evento de um span com o prefixo dado."""
    p = tuple(prefix)
    return [p + ("start",), p + ("stop",), p + ("exception",)]
