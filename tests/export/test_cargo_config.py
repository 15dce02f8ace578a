# tests/export/test_cargo_config.py
"""
Testes da renderização da política em `.cargo/config.toml`.

Os testes asseguram que:
- aliases (inclusive `__vendored`) são emitidos na ordem de declaração
- a seção de fontes só aparece com vendoring ativo
- os pares de rustflags refletem a política efetiva
- a saída é determinística
"""

from buildgate.core.config import load_config
from buildgate.core.policy import load_policy
from buildgate.export import render_cargo_config


def test_packaged_policy_renders_native_config():
    policy = load_policy(load_config(), verify_vendor=False)
    text = render_cargo_config(policy)

    assert text.startswith("[alias]\n")
    assert (
        '__vendored = ["--config", "source.crates-io.replace-with = \\"vendored-sources\\"", '
        '"--frozen", "--offline"]'
    ) in text
    assert 'v-check = ["__vendored", "check"]' in text
    assert "[source.crates-io]" not in text
    assert sum("replace-with" in line for line in text.splitlines()) == 1
    assert '[source.vendored-sources]\ndirectory = "vendor"' in text
    assert '    "-D", "clippy::unwrap_used",' in text
    assert '    "-W", "let_underscore_drop",' in text


def test_output_is_deterministic():
    policy = load_policy(load_config(), verify_vendor=False)
    assert render_cargo_config(policy) == render_cargo_config(policy)


def test_no_sources_or_build_without_vendor_and_lints(policy_config):
    policy_config["lints"] = []
    text = render_cargo_config(load_policy(policy_config))

    assert "[source." not in text
    assert "[build]" not in text
    assert "__vendored = []" in text
    assert 'a = ["check", "--workspace"]' in text
