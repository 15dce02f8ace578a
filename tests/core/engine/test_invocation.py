# tests/core/engine/test_invocation.py
"""
Testes da montagem de invocações e de `run_alias`.
"""

import pytest

from buildgate.core.engine.invocation import build_invocation, run_alias, stage_tokens
from buildgate.core.exceptions import UnknownAliasError
from buildgate.core.pipeline import CommandResult, PipelineStage, RunEnvironment
from buildgate.core.policy import load_policy


def test_build_invocation_prefixes_toolchain(policy_config):
    policy = load_policy(policy_config)

    inv = build_invocation(policy, ["check", "--workspace"], environment=RunEnvironment())

    assert inv.argv == ("cargo", "check", "--workspace")
    assert set(inv.env) == {"RUSTFLAGS"}


def test_no_rustflags_without_lints(policy_config):
    policy_config["lints"] = []
    policy = load_policy(policy_config)

    inv = build_invocation(policy, ["build"], environment=RunEnvironment(backtrace="1"))

    assert inv.env == {"RUST_BACKTRACE": "1"}


def test_stage_tokens_alias_or_args(policy_config):
    policy = load_policy(policy_config)

    assert stage_tokens(policy, PipelineStage(name="A", ordinal=0, alias="a")) == ["check", "--workspace"]
    assert stage_tokens(policy, PipelineStage(name="X", ordinal=9, args=("doc",))) == ["doc"]


def test_run_alias_appends_extra_args(policy_config, fake_executor):
    policy = load_policy(policy_config)
    executor = fake_executor({"test": CommandResult(returncode=4)})

    result = run_alias(
        policy,
        "c",
        extra_args=["--", "--nocapture"],
        executor=executor,
        environment=RunEnvironment(),
    )

    assert result.returncode == 4
    assert executor.calls[0][0] == ("cargo", "test", "--workspace", "--", "--nocapture")


def test_run_alias_unknown_spawns_nothing(policy_config, fake_executor):
    policy = load_policy(policy_config)
    executor = fake_executor()

    with pytest.raises(UnknownAliasError):
        run_alias(policy, "nope", executor=executor, environment=RunEnvironment())
    assert executor.calls == []
