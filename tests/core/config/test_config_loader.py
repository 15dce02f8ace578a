# tests/core/config/test_config_loader.py
"""
Testes do carregador de configuração (load_config).

Os testes asseguram que:
- o arquivo defaults é obrigatório
- o arquivo local é opcional e, quando presente, tem prioridade
- formatos não suportados e raízes não-dict são rejeitados
- sem `defaults_path`, a política distribuída com o pacote é usada

Invariantes:
    - A configuração final é sempre um dicionário
    - Nenhuma configuração parcial é retornada em caso de erro
"""

from pathlib import Path

import pytest

try:
    from buildgate.core.config.loader import DEFAULT_POLICY_PATH, load_config
    from buildgate.core.config.errors import (
        DefaultsNotFoundError,
        InvalidConfigRootTypeError,
        UnsupportedConfigFormatError,
    )
except Exception as e:  # noqa: BLE001
    load_config = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing config loader. Implement:\n"
            "- src/buildgate/core/config/loader.py (load_config)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_missing_defaults_raises(tmp_path: Path):
    _require_imports()
    with pytest.raises(DefaultsNotFoundError):
        load_config(defaults_path=str(tmp_path / "policy.yaml"))


def test_missing_local_is_ignored(tmp_path: Path, policy_defaults_yaml):
    _require_imports()
    defaults = tmp_path / "policy.yaml"
    defaults.write_text(policy_defaults_yaml, encoding="utf-8")

    cfg = load_config(defaults_path=str(defaults), local_path=str(tmp_path / "local.yaml"))

    assert cfg["toolchain"] == "cargo"
    assert cfg["aliases"]["v-check"] == "__vendored check"


def test_local_overrides_defaults(tmp_path: Path, policy_defaults_yaml, policy_local_yaml):
    """
    O local mescla dicts por chave e substitui listas por inteiro.

    A lista de lints do local substitui a do defaults; o alias novo
    convive com os aliases herdados.
    """
    _require_imports()
    defaults = tmp_path / "policy.yaml"
    local = tmp_path / "local.yaml"
    defaults.write_text(policy_defaults_yaml, encoding="utf-8")
    local.write_text(policy_local_yaml, encoding="utf-8")

    cfg = load_config(defaults_path=str(defaults), local_path=str(local))

    assert set(cfg["aliases"]) == {"v-check", "fmt-check", "doc-all"}
    assert cfg["lints"] == [{"name": "clippy::unwrap_used", "severity": "warn"}]
    assert cfg["pipeline"]["environment"] == {"backtrace": "1", "force_color": True}


def test_json_defaults_are_supported(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "policy.json"
    defaults.write_text('{"toolchain": "cargo", "aliases": {"b": "build"}}', encoding="utf-8")

    assert load_config(defaults_path=str(defaults)) == {"toolchain": "cargo", "aliases": {"b": "build"}}


def test_empty_file_is_empty_dict(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "policy.yaml"
    defaults.write_text("", encoding="utf-8")

    assert load_config(defaults_path=str(defaults)) == {}


def test_invalid_root_type_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "policy.yaml"
    defaults.write_text("- check\n- build\n", encoding="utf-8")

    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=str(defaults))


def test_unsupported_extension_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "policy.toml"
    defaults.write_text("toolchain = 'cargo'\n", encoding="utf-8")

    with pytest.raises(UnsupportedConfigFormatError):
        load_config(defaults_path=str(defaults))


def test_packaged_defaults_are_used_without_path():
    """A política distribuída reproduz aliases, lints e estágios de CI."""
    _require_imports()
    assert DEFAULT_POLICY_PATH.exists()

    cfg = load_config()

    assert cfg["toolchain"] == "cargo"
    assert cfg["vendor"]["enabled"] is True
    assert cfg["aliases"]["v-check"] == "__vendored check"
    assert [s["name"] for s in cfg["pipeline"]["stages"]] == [
        "format-check",
        "lint-check",
        "build",
        "test",
    ]
