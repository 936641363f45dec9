"""Shared domain models for npm-windows-upgrade."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class UpgradeOptions:
    """Options parsed from the command line before any side effect runs."""

    version: Optional[str] = None
    verbose: Optional[bool] = None
    log_file: Optional[str] = None
    config: Optional[str] = None


@dataclass(frozen=True)
class ProcessOutput:
    """Captured result of an external process, split by stream."""

    returncode: int
    stdout: List[str] = field(default_factory=list)
    stderr: List[str] = field(default_factory=list)

    @property
    def first_stdout(self) -> str:
        return self.stdout[0] if self.stdout else ""


class UpgradeOutcome(Enum):
    SUCCESS = "success"
    ADMIN_REQUIRED = "admin_required"
    RELAUNCHED = "relaunched"
    MISMATCH_FAILURE = "mismatch_failure"


@dataclass(frozen=True)
class UpgradeReport:
    outcome: UpgradeOutcome
    target_version: str
    installed_version: Optional[str]
    output: ProcessOutput

    @property
    def succeeded(self) -> bool:
        return self.outcome is UpgradeOutcome.SUCCESS


@dataclass(frozen=True)
class UpgradeSettings:
    """Collaborator commands and locations resolved from config and CLI."""

    npm_command: str
    powershell_command: str
    script_path: str
    dns_host: str
    install_path: Optional[str] = None
