import socket
import subprocess

import pytest

from npmupgrader.errors import PlatformNotSupportedError
from npmupgrader.services.preflight import PreflightService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


def _service(resolver=None) -> PreflightService:
    return PreflightService(
        logger=DummyLogger(),
        powershell_command="powershell.exe",
        resolver=resolver,
    )


@pytest.mark.parametrize("platform", ["linux", "darwin", "cygwin", "freebsd13", ""])
def test_ensure_windows_rejects_other_platforms(platform):
    with pytest.raises(PlatformNotSupportedError, match="only runs on Windows"):
        _service().ensure_windows(platform)


def test_ensure_windows_accepts_win32():
    _service().ensure_windows("win32")


def _policy_runner(stdout: str, stderr: str = ""):
    calls = []

    def run_cmd(cmd, check=True, capture_output=False):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr=stderr)

    return run_cmd, calls


def test_execution_policy_unrestricted_allows_scripts():
    run_cmd, calls = _policy_runner("Unrestricted\r\n")

    assert _service().execution_policy_allows_scripts(run_cmd) is True
    assert calls == [["powershell.exe", "-NoProfile", "-NoLogo", "Get-ExecutionPolicy"]]


def test_execution_policy_token_found_in_any_line():
    run_cmd, _ = _policy_runner("Unrestricted\n\n\n", stderr="some warning\n")

    assert _service().execution_policy_allows_scripts(run_cmd) is True


@pytest.mark.parametrize("policy", ["Restricted", "RemoteSigned", "AllSigned", ""])
def test_execution_policy_without_unrestricted_blocks_scripts(policy):
    run_cmd, _ = _policy_runner(f"{policy}\n")

    assert _service().execution_policy_allows_scripts(run_cmd) is False


def _raising_resolver(exc):
    def resolver(*_args, **_kwargs):
        raise exc

    return resolver


def test_is_online_when_lookup_succeeds():
    resolved = []

    def resolver(host, port):
        resolved.append(host)
        return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("1.2.3.4", 0))]

    assert _service(resolver).is_online("microsoft.com") is True
    assert resolved == ["microsoft.com"]


def test_is_offline_only_when_name_not_found():
    resolver = _raising_resolver(socket.gaierror(socket.EAI_NONAME, "Name or service not known"))

    assert _service(resolver).is_online("microsoft.com") is False


@pytest.mark.parametrize(
    "exc",
    [
        socket.gaierror(socket.EAI_AGAIN, "Temporary failure in name resolution"),
        socket.timeout("timed out"),
        OSError("network is unreachable"),
    ],
)
def test_other_dns_errors_count_as_online(exc):
    assert _service(_raising_resolver(exc)).is_online("microsoft.com") is True
