# tests/core/engine/test_subprocess_executor.py
"""
Testes do executor de processos externos.

Usa o próprio interpretador como processo filho, para não depender de
uma toolchain instalada.
"""

import subprocess
import sys

import pytest

from buildgate.core.engine import executor as executor_module
from buildgate.core.engine.executor import SubprocessExecutor
from buildgate.core.exceptions import CommandCancelledError, CommandLaunchError


def test_captures_output_and_returncode():
    result = SubprocessExecutor().execute(
        [sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)"],
        env={},
    )

    assert result.returncode == 3
    assert result.stdout.strip() == "out"
    assert result.stderr.strip() == "err"
    assert not result.ok


def test_invocation_env_is_overlaid():
    result = SubprocessExecutor().execute(
        [sys.executable, "-c", "import os; print(os.environ['RUSTFLAGS'])"],
        env={"RUSTFLAGS": "-Dclippy::unwrap_used"},
    )

    assert result.ok
    assert result.stdout.strip() == "-Dclippy::unwrap_used"


def test_missing_binary_raises_launch_error(tmp_path):
    with pytest.raises(CommandLaunchError) as exc:
        SubprocessExecutor().execute([str(tmp_path / "no-such-cargo"), "build"], env={})
    assert exc.value.details["argv"][1] == "build"


class _InterruptedProcess:
    instances = []

    def __init__(self, argv, **kwargs):
        self.argv = argv
        self.terminated = False
        self.returncode = None
        _InterruptedProcess.instances.append(self)

    def communicate(self):
        raise KeyboardInterrupt

    def terminate(self):
        self.terminated = True

    def wait(self, timeout=None):
        self.returncode = -15
        return self.returncode


def test_interrupt_terminates_process(monkeypatch):
    _InterruptedProcess.instances.clear()
    monkeypatch.setattr(executor_module.subprocess, "Popen", _InterruptedProcess)

    with pytest.raises(CommandCancelledError) as exc:
        SubprocessExecutor().execute(["cargo", "test"], env={})

    assert exc.value.details["reason"] == "cancelled"
    assert _InterruptedProcess.instances[0].terminated is True


def test_interrupt_kills_after_grace(monkeypatch):
    class _Stubborn(_InterruptedProcess):
        killed = False

        def wait(self, timeout=None):
            if timeout is not None:
                raise subprocess.TimeoutExpired(cmd=self.argv, timeout=timeout)
            return -9

        def kill(self):
            _Stubborn.killed = True

    monkeypatch.setattr(executor_module.subprocess, "Popen", _Stubborn)

    with pytest.raises(CommandCancelledError):
        SubprocessExecutor().execute(["cargo", "test"], env={})
    assert _Stubborn.killed is True


def test_invalid_utf8_output_is_replaced():
    result = SubprocessExecutor().execute(
        [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'ident \\xff\\xfe ok\\n')"],
        env={},
    )

    assert result.ok
    assert result.stdout == "ident \ufffd\ufffd ok\n"
