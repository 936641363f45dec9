import sys

import pytest

from npmupgrader.errors import UpgraderError
from npmupgrader.services.command_runner import CommandRunner


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


def test_command_runner_raises_with_stderr():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(UpgraderError, match="boom"):
        runner.run(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(1)"],
            check=True,
            capture_output=True,
        )


def test_command_runner_returns_when_check_disabled():
    runner = CommandRunner(logger=DummyLogger())

    result = runner.run(
        [sys.executable, "-c", "import sys; sys.exit(1)"],
        check=False,
        capture_output=True,
    )

    assert result.returncode == 1


def test_command_runner_reports_missing_command():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(UpgraderError, match="Required command not found"):
        runner.run(["definitely-not-a-real-command-xyz"], capture_output=True)


def test_stream_keeps_streams_separate_and_echoes_errors():
    runner = CommandRunner(logger=DummyLogger())
    echoed = []

    output = runner.stream(
        [
            sys.executable,
            "-c",
            (
                "import sys;"
                "print('first');"
                "sys.stderr.write('oops\\n');"
                "print('');"
                "print('second');"
                "sys.exit(3)"
            ),
        ],
        on_stderr=echoed.append,
    )

    assert output.returncode == 3
    assert output.stdout == ["first", "second"]
    assert output.stderr == ["oops"]
    assert echoed == ["oops"]


def test_stream_reports_missing_command():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(UpgraderError, match="Required command not found"):
        runner.stream(["definitely-not-a-real-command-xyz"])


def test_stream_replaces_undecodable_bytes_on_both_streams():
    runner = CommandRunner(logger=DummyLogger())
    echoed = []

    output = runner.stream(
        [
            sys.executable,
            "-c",
            (
                "import sys;"
                "sys.stdout.buffer.write(b'caf\\x81\\xff\\nnext\\n');"
                "sys.stdout.buffer.flush();"
                "sys.stderr.buffer.write(b'bad\\xff\\nsecond\\n');"
                "sys.stderr.buffer.flush()"
            ),
        ],
        on_stderr=echoed.append,
    )

    assert output.returncode == 0
    assert len(output.stdout) == 2
    assert output.stdout[0].startswith("caf")
    assert output.stdout[1] == "next"
    assert len(output.stderr) == 2
    assert output.stderr[0].startswith("bad")
    assert output.stderr[1] == "second"
    assert echoed == output.stderr


def test_stream_kills_child_when_reading_fails():
    class ExplodingLogger(DummyLogger):
        def debug(self, message, *_args, **_kwargs):
            if message == "first":
                raise RuntimeError("logger broke")

    runner = CommandRunner(logger=ExplodingLogger())

    with pytest.raises(RuntimeError, match="logger broke"):
        runner.stream(
            [sys.executable, "-c", "import time; print('first', flush=True); time.sleep(30)"]
        )
