# src/actionflow/core/__init__.py
"""
Core do ActionFlow.

Componentes principais:
    - pipeline  → Context, protocolo de Step, resolução e registry de actions
    - engine    → Pipeline Runner e ponto de entrada `run_action`
    - telemetry → barramento de eventos, Span Wrapper e Event Log
    - config    → carregamento de configuração e settings do engine

Princípios fundamentais:
    - Nenhum estado global: cada ActionSet produz o seu próprio registry
    - Cada execução de action possui o seu próprio Context
    - Falhas de Steps nunca escapam de `run`; viram resultados de erro

Limites explícitos:
    - Não define Steps de domínio
    - Não depende de frameworks web ou de persistência
"""
