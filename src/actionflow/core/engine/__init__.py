# src/actionflow/core/engine/__init__.py
"""
Engine do ActionFlow.

Componentes principais:
    - runner → fold sequencial dos Steps (Pipeline Runner)
    - engine → `run_action`: busca, construção do Context, span e
      normalização do resultado

Invariantes:
    - Cada Step é executado no máximo uma vez por invocação
    - O resultado final é sempre `(ok, valor)` ou `(error, motivo)`
"""
