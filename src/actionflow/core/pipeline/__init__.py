# src/actionflow/core/pipeline/__init__.py
"""
# Pipeline Core: ActionFlow

Uma action é uma **lista ordenada de Steps** aplicada a um `Context`
imutável. Cada Step devolve `(cont, ctx)` para seguir ou
`(halt, (ok|error, valor))` para encerrar a action.

## Componentes

- **types**
  - `Signal`: `cont` | `halt`
  - `Outcome`: `ok` | `error`

- **context**
  - `Context`: estado de uma execução (`assigns`, `params`, `private`, `result`)

- **step**
  - `LocalStep` / `ExternalStep`: identificadores de Step
  - `StepBinding`: formas de chamada resolvidas no registro

- **resolver**
  - `invoke_step`: despacho do Step embutido, local ou externo

- **registry**
  - `ActionSet`: builder explícito de actions
  - `ActionRegistry`: valor imutável pronto para `run`

## Invariantes

- Steps executam estritamente na ordem declarada
- Um Step só observa efeitos de Steps anteriores
- Após um `halt`, nenhum Step seguinte é invocado
"""
