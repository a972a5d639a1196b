# tests/core/pipeline/test_step_binding.py
"""
Testes do binding de Steps e da normalização de declarações.

Os testes asseguram que:
- a aridade de um Step é decidida UMA vez, a partir da assinatura
- a forma `(ctx, opts)` é preferida sobre `(ctx)`
- as formas curtas de declaração viram `StepEntry` corretas
- opções de um Step são somente-leitura
"""

import pytest

try:
    from actionflow.core.pipeline.step import (
        ExternalStep,
        LocalStep,
        StepBinding,
        StepEntry,
        to_step_entry,
    )
except Exception as e:  # noqa: BLE001
    StepBinding = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing step module. Implement:\n"
            "- src/actionflow/core/pipeline/step.py (StepBinding, to_step_entry)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def one_arg(ctx):
    return ctx


def two_args(ctx, opts):
    return ctx


def optional_opts(ctx, opts=None):
    return ctx


def three_args(ctx, opts, extra):
    return ctx


def test_binding_for_one_argument_step():
    _require_imports()
    b = StepBinding.from_callable(one_arg)
    assert b.with_options is None
    assert b.without_options is one_arg


def test_binding_for_two_argument_step():
    _require_imports()
    b = StepBinding.from_callable(two_args)
    assert b.with_options is two_args
    assert b.without_options is None


def test_binding_with_optional_second_argument_has_both_forms():
    _require_imports()
    b = StepBinding.from_callable(optional_opts)
    assert b.with_options is optional_opts
    assert b.without_options is optional_opts


def test_binding_rejects_incompatible_signatures():
    _require_imports()
    assert StepBinding.from_callable(three_args).empty
    assert StepBinding.from_callable(lambda: None).empty
    assert StepBinding.from_callable(None).empty
    assert StepBinding.from_callable("not callable").empty


def test_binding_for_bound_method():
    """`self` não conta na aridade de métodos ligados."""
    _require_imports()

    class Billing:
        def charge(self, ctx, opts):
            return ctx

    b = StepBinding.from_callable(Billing().charge)
    assert b.with_options is not None


def test_to_step_entry_short_forms():
    _require_imports()
    provider = object()

    assert to_step_entry("load_user") == StepEntry(LocalStep("load_user"), {})
    assert to_step_entry(LocalStep("x")).ref == LocalStep("x")

    ext = to_step_entry((provider, "charge"))
    assert ext.ref == ExternalStep(provider, "charge")

    with_opts = to_step_entry(("load_user", {"preload": True}))
    assert with_opts.ref == LocalStep("load_user")
    assert dict(with_opts.options) == {"preload": True}

    ext_opts = to_step_entry(((provider, "charge"), {"plan": "basic"}))
    assert ext_opts.ref == ExternalStep(provider, "charge")
    assert dict(ext_opts.options) == {"plan": "basic"}


def test_to_step_entry_options_are_read_only():
    _require_imports()
    entry = to_step_entry(("s", {"k": 1}))
    with pytest.raises(TypeError):
        entry.options["k"] = 2


@pytest.mark.parametrize("spec", ["", "   ", 42, None, ("a", "b", "c")])
def test_to_step_entry_rejects_invalid_declarations(spec):
    _require_imports()
    with pytest.raises(ValueError):
        to_step_entry(spec)


def test_external_step_str_uses_provider_name():
    _require_imports()

    class Billing:
        pass

    assert str(ExternalStep(Billing, "charge")) == "Billing.charge"
    assert str(ExternalStep(Billing(), "charge")) == "Billing.charge"
