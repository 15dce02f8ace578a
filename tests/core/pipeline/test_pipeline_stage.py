# tests/core/pipeline/test_pipeline_stage.py
"""
Testes da declaração de estágios e do registro estrutural.

Os testes asseguram que:
- cada estágio declara exatamente um entre `alias` e `args`
- nomes e ordinais duplicados são rejeitados antes da execução
- o planner ordena estritamente por ordinal
"""

import pytest

from buildgate.core.config.errors import MalformedPipelineError
from buildgate.core.engine.planner import plan_stages
from buildgate.core.pipeline import CommandExecutor, DuplicateStageError, PipelineStage, StageRegistry


def test_alias_stage():
    stage = PipelineStage.from_config({"name": "lint-check", "alias": "lint-check"}, ordinal=1)
    assert stage == PipelineStage(name="lint-check", ordinal=1, alias="lint-check")


def test_args_stage_accepts_string_and_list():
    a = PipelineStage.from_config({"name": "fmt", "args": "fmt --all -- --check"}, ordinal=0)
    b = PipelineStage.from_config({"name": "fmt", "args": ["fmt", "--all", "--", "--check"]}, ordinal=0)
    assert a == b
    assert a.args == ("fmt", "--all", "--", "--check")


@pytest.mark.parametrize(
    "raw",
    [
        {"name": "x"},
        {"name": "x", "alias": "a", "args": ["build"]},
        {"alias": "a"},
        {"name": "x", "args": [1, 2]},
        {"name": "x", "alias": "a", "ordinal": "first"},
        "build",
    ],
)
def test_malformed_stage_raises(raw):
    with pytest.raises(MalformedPipelineError):
        PipelineStage.from_config(raw, ordinal=0)


def test_registry_rejects_duplicates():
    registry = StageRegistry()
    registry.add(PipelineStage(name="build", ordinal=0, alias="b"))

    with pytest.raises(DuplicateStageError):
        registry.add(PipelineStage(name="build", ordinal=1, alias="b"))
    with pytest.raises(DuplicateStageError):
        registry.add(PipelineStage(name="test", ordinal=0, alias="t"))


def test_planner_orders_by_ordinal():
    stages = [
        PipelineStage(name="test", ordinal=3, alias="t"),
        PipelineStage(name="fmt", ordinal=0, alias="f"),
        PipelineStage(name="build", ordinal=2, alias="b"),
    ]
    assert [s.name for s in plan_stages(stages)] == ["fmt", "build", "test"]


def test_fake_executor_satisfies_protocol(fake_executor):
    assert isinstance(fake_executor(), CommandExecutor)
