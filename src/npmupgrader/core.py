import logging
import subprocess
from typing import List, Optional

from rich.console import Console

from .constants import POLICY_REMEDIATION_COMMAND
from .errors import GateError, UpgraderError
from .errors_catalog import actionable_error
from .models import ProcessOutput, UpgradeReport, UpgradeSettings
from .services.command_runner import CommandRunner
from .services.npm import NpmService
from .services.preflight import PreflightService
from .services.prompts import PromptService
from .services.upgrade_script import UpgradeScriptService

console = Console()
logger = logging.getLogger("npmupgrader")


class NpmUpgrader:
    CONSENT_MESSAGE = "This tool will upgrade npm. Do you want to continue?"
    DECLINED_MESSAGE = "Well then, we're done here. Have a nice day!"
    SELECT_MESSAGE = "Which version do you want to install?"

    def __init__(
        self,
        settings: UpgradeSettings,
        target_version: Optional[str] = None,
        prompt_service: Optional[PromptService] = None,
        resolver=None,
        subprocess_module=subprocess,
        platform: Optional[str] = None,
    ):
        self.settings = settings
        self.requested_version = target_version
        self.platform = platform

        self.command_runner = CommandRunner(logger=logger, subprocess_module=subprocess_module)
        self.prompt_service = prompt_service or PromptService(console=console)
        self.preflight_service = PreflightService(
            logger=logger,
            powershell_command=settings.powershell_command,
            resolver=resolver,
        )
        self.npm_service = NpmService(
            logger=logger,
            npm_command=settings.npm_command,
            run_cmd=self._run_cmd,
        )
        self.upgrade_script_service = UpgradeScriptService(
            logger=logger,
            console=console,
            powershell_command=settings.powershell_command,
            script_path=settings.script_path,
        )

    def _run_cmd(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
    ) -> subprocess.CompletedProcess:
        return self.command_runner.run(cmd, check=check, capture_output=capture_output)

    def _stream_cmd(self, cmd: List[str], on_stderr=None) -> ProcessOutput:
        return self.command_runner.stream(cmd, on_stderr=on_stderr)

    def ensure_supported_platform(self):
        self.preflight_service.ensure_windows(self.platform)

    def confirm_upgrade(self) -> bool:
        return self.prompt_service.confirm(self.CONSENT_MESSAGE)

    def check_execution_policy(self):
        logger.debug("Checking PowerShell execution policy...")
        if not self.preflight_service.execution_policy_allows_scripts(self._run_cmd):
            raise GateError(
                actionable_error("execution_policy_restricted", command=POLICY_REMEDIATION_COMMAND)
            )

    def check_internet_connection(self):
        logger.debug("Checking connectivity via %s...", self.settings.dns_host)
        if not self.preflight_service.is_online(self.settings.dns_host):
            raise GateError(actionable_error("offline"))

    def resolve_target_version(self) -> str:
        """Explicit version first, otherwise let the user pick from the registry."""
        if self.requested_version:
            if self.npm_service.is_exact_version(self.requested_version):
                return self.requested_version

            resolved = self.npm_service.resolve_tag(self.requested_version)
            console.print(
                f"[blue]Resolved npm@{self.requested_version} to version {resolved}.[/blue]"
            )
            return resolved

        versions = self.npm_service.get_available_versions()
        selected = self.prompt_service.select(self.SELECT_MESSAGE, list(reversed(versions)))
        if not selected:
            raise GateError(actionable_error("no_version_selected"))
        return selected

    def get_installed_version(self) -> str:
        try:
            return self.npm_service.get_installed_version() or "unknown"
        except UpgraderError as exc:
            logger.debug("Could not read the installed npm version: %s", exc)
            return "unknown"

    def upgrade(self, target_version: str) -> UpgradeReport:
        current_version = self.get_installed_version()
        console.print(f"[blue]Upgrading npm from {current_version} to {target_version}.[/blue]")
        logger.debug("Target version: %s, current version: %s", target_version, current_version)

        report = self.upgrade_script_service.run_upgrade(
            target_version=target_version,
            npm_service=self.npm_service,
            stream=self._stream_cmd,
            install_path=self.settings.install_path,
        )
        logger.debug("Upgrade finished with outcome %s", report.outcome.value)
        return report

    def run(self) -> int:
        # Raised before anything else and never handled here.
        self.ensure_supported_platform()

        try:
            if not self.confirm_upgrade():
                console.print(self.DECLINED_MESSAGE)
                return 0

            self.check_execution_policy()
            self.check_internet_connection()
            target_version = self.resolve_target_version()
            report = self.upgrade(target_version)
            return 0 if report.succeeded else 1

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 1
        except UpgraderError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.debug(str(exc))
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            return 1
