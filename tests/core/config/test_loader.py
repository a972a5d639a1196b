# tests/core/config/test_loader.py
"""
Testes do carregador de configuração (load_config).

Os testes asseguram que:
- o arquivo defaults é obrigatório
- o arquivo local é opcional e atua como override via deep-merge
- YAML e JSON são aceitos; outras extensões são rejeitadas
- a raiz da configuração precisa ser um mapa

Invariantes:
    - Nenhuma configuração parcial é retornada em caso de erro
"""

import json
from pathlib import Path

import pytest

try:
    from actionflow.core.config.errors import (
        DefaultsNotFoundError,
        InvalidConfigRootTypeError,
        UnsupportedConfigFormatError,
    )
    from actionflow.core.config.loader import load_config, parse_config_text
except Exception as e:  # noqa: BLE001
    load_config = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que o loader de configuração e suas exceções tipadas estejam disponíveis.

    Falha imediatamente quando o módulo `loader` ou as exceções canônicas
    de `errors` não podem ser importados, sem fallback.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing loader/errors modules. Implement:\n"
            "- src/actionflow/core/config/loader.py (load_config)\n"
            "- src/actionflow/core/config/errors.py (typed exceptions)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_missing_defaults_raises(tmp_path: Path):
    _require_imports()
    with pytest.raises(DefaultsNotFoundError):
        load_config(defaults_path=str(tmp_path / "defaults.yaml"), local_path=None)


def test_load_defaults_only(tmp_path: Path, config_defaults_yaml):
    _require_imports()
    defaults = tmp_path / "config.defaults.yaml"
    defaults.write_text(config_defaults_yaml, encoding="utf-8")

    out = load_config(defaults_path=defaults)
    assert out["owner"] == "accounts"
    assert out["telemetry"]["prefix"] == ["accounts", "action"]
    assert out["errors"]["expose_exception_messages"] is False


def test_missing_local_is_ok(tmp_path: Path, config_defaults_yaml):
    _require_imports()
    defaults = tmp_path / "config.defaults.yaml"
    defaults.write_text(config_defaults_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(tmp_path / "config.local.yaml"))
    assert out["errors"]["expose_exception_messages"] is False


def test_load_defaults_and_local(tmp_path: Path, config_defaults_yaml, config_local_yaml):
    _require_imports()
    defaults = tmp_path / "config.defaults.yaml"
    local = tmp_path / "config.local.yaml"
    defaults.write_text(config_defaults_yaml, encoding="utf-8")
    local.write_text(config_local_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(local))
    assert out["errors"]["expose_exception_messages"] is True
    # chaves não sobrescritas permanecem
    assert out["telemetry"]["prefix"] == ["accounts", "action"]
    assert list(out["actions"]) == ["create_user"]


def test_json_defaults(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "config.json"
    defaults.write_text(json.dumps({"owner": "billing"}), encoding="utf-8")
    assert load_config(defaults_path=defaults) == {"owner": "billing"}


def test_empty_file_is_empty_config(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "empty.yml"
    defaults.write_text("", encoding="utf-8")
    assert load_config(defaults_path=defaults) == {}


def test_invalid_root_type_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "config.defaults.yaml"
    defaults.write_text("- just\n- a\n- list\n", encoding="utf-8")
    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=str(defaults), local_path=None)


def test_unsupported_extension_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "config.defaults.toml"
    defaults.write_text("owner = 'accounts'\n", encoding="utf-8")
    with pytest.raises(UnsupportedConfigFormatError):
        load_config(defaults_path=str(defaults), local_path=None)


def test_parse_config_text():
    _require_imports()
    assert parse_config_text("owner: accounts\n") == {"owner": "accounts"}
    assert parse_config_text('{"owner": "x"}', fmt="json") == {"owner": "x"}
    with pytest.raises(UnsupportedConfigFormatError):
        parse_config_text("x", fmt="ini")
