# src/actionflow/core/telemetry/metadata.py
"""
Composição de metadata de spans.

Fontes, em ordem crescente de precedência (a posterior sobrescreve chaves
iguais da anterior):
    1. metadata fixa: `{"owner": ..., "action": ...}`
    2. função de metadata do ActionSet (owner)
    3. função de metadata da action

Cada função é chamada sob contenção de falhas: se levantar, ou devolver
algo que não seja um mapa, a fonte vale `{}`. O cálculo de metadata
nunca aborta a action.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from actionflow.core.pipeline.context import Context

MetadataFn = Callable[[Context], Mapping[str, Any]]


def safe_metadata(fn: Optional[MetadataFn], ctx: Context) -> Dict[str, Any]:
    if fn is None:
        return {}
    try:
        out = fn(ctx)
    except Exception:
        return {}
    if not isinstance(out, Mapping):
        return {}
    return dict(out)


@dataclass(frozen=True)
class MetadataComposer:
    """Mescla as três fontes de metadata de uma action."""

    owner: Any
    owner_metadata: Optional[MetadataFn] = None
    action_metadata: Optional[MetadataFn] = None

    def compose(self, ctx: Context) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {"owner": self.owner, "action": ctx.action}
        metadata.update(safe_metadata(self.owner_metadata, ctx))
        metadata.update(safe_metadata(self.action_metadata, ctx))
        return metadata
