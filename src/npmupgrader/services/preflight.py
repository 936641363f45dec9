"""Host precondition checks run before any upgrade work."""

import socket
import sys
from typing import Callable, List, Optional

from npmupgrader.constants import (
    DEFAULT_DNS_HOST,
    SUPPORTED_PLATFORM,
    UNRESTRICTED_POLICY_TOKEN,
)
from npmupgrader.errors import PlatformNotSupportedError
from npmupgrader.errors_catalog import actionable_error

NAME_NOT_FOUND_ERRNOS = {
    code
    for code in (getattr(socket, "EAI_NONAME", None), getattr(socket, "EAI_NODATA", None))
    if code is not None
}


class PreflightService:
    """Platform, execution policy and connectivity checks."""

    def __init__(self, logger, powershell_command: str, resolver: Optional[Callable] = None):
        self.logger = logger
        self.powershell_command = powershell_command
        self.resolver = resolver or socket.getaddrinfo

    def ensure_windows(self, platform: Optional[str] = None):
        current = platform if platform is not None else sys.platform
        if current != SUPPORTED_PLATFORM:
            raise PlatformNotSupportedError(
                actionable_error("unsupported_platform", platform=current)
            )

    def policy_command(self) -> List[str]:
        return [self.powershell_command, "-NoProfile", "-NoLogo", "Get-ExecutionPolicy"]

    def execution_policy_allows_scripts(self, run_cmd: Callable) -> bool:
        result = run_cmd(self.policy_command(), check=False, capture_output=True)
        lines = (result.stdout or "").splitlines() + (result.stderr or "").splitlines()

        for line in reversed(lines):
            if UNRESTRICTED_POLICY_TOKEN in line:
                return True

        self.logger.debug("Execution policy output did not allow scripts: %s", lines)
        return False

    def is_online(self, host: str = DEFAULT_DNS_HOST) -> bool:
        """Only a "name not found" answer counts as offline.

        Timeouts and other resolver failures are reported as online.
        """
        try:
            self.resolver(host, None)
        except socket.gaierror as exc:
            if exc.errno in NAME_NOT_FOUND_ERRNOS:
                self.logger.debug("DNS lookup for %s found no such host: %s", host, exc)
                return False
            self.logger.debug("Ignoring DNS error for %s: %s", host, exc)
        except OSError as exc:
            self.logger.debug("Ignoring DNS error for %s: %s", host, exc)
        return True
