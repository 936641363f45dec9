"""Elevated upgrade script execution and outcome verification."""

from typing import Callable, List, Optional, Sequence, Tuple

from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from npmupgrader.constants import ADMIN_REQUIRED_MARKER, ISSUES_URL, RELAUNCH_MARKER
from npmupgrader.errors import UpgraderError
from npmupgrader.models import ProcessOutput, UpgradeOutcome, UpgradeReport

OutputRule = Tuple[Callable[[str], bool], UpgradeOutcome]


def _contains(marker: str) -> Callable[[str], bool]:
    return lambda text: marker in text.lower()


class UpgradeScriptService:
    """Runs upgrade-npm.ps1 and decides how the run ended."""

    # Evaluated top-down against the first line the script printed.
    OUTPUT_RULES: Sequence[OutputRule] = (
        (_contains(ADMIN_REQUIRED_MARKER), UpgradeOutcome.ADMIN_REQUIRED),
        (_contains(RELAUNCH_MARKER), UpgradeOutcome.RELAUNCHED),
    )

    def __init__(self, logger, console, powershell_command: str, script_path: str):
        self.logger = logger
        self.console = console
        self.powershell_command = powershell_command
        self.script_path = script_path

    def build_command(self, target_version: str, install_path: Optional[str]) -> List[str]:
        cmd = [
            self.powershell_command,
            "-NoProfile",
            "-NoLogo",
            "-ExecutionPolicy",
            "Unrestricted",
            "-File",
            self.script_path,
            "-version",
            target_version,
        ]
        if install_path:
            cmd += ["-NodePath", install_path]
        return cmd

    def classify_output(self, output: ProcessOutput) -> Optional[UpgradeOutcome]:
        first_line = output.first_stdout
        for predicate, outcome in self.OUTPUT_RULES:
            if predicate(first_line):
                return outcome
        return None

    def echo_diagnostic(self, line: str):
        self.logger.debug("upgrade-npm.ps1: %s", line)
        self.console.print(f"[red]{escape(line)}[/red]")

    def run_upgrade(
        self,
        target_version: str,
        npm_service,
        stream: Callable,
        install_path: Optional[str] = None,
        diagnostic_sink: Optional[Callable[[str], None]] = None,
    ) -> UpgradeReport:
        sink = diagnostic_sink or self.echo_diagnostic

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=self.console,
        ) as progress:
            progress.add_task(
                f"[bold magenta]Upgrading npm to {target_version}... this might take a few minutes.",
                total=None,
            )

            if not install_path:
                install_path = npm_service.get_install_prefix()
            if install_path:
                self.logger.debug("Upgrading npm installed at %s", install_path)

            output = stream(self.build_command(target_version, install_path), on_stderr=sink)

        outcome = self.classify_output(output)

        if outcome is UpgradeOutcome.ADMIN_REQUIRED:
            self.console.print(
                "[bold red]npm cannot be upgraded without administrative rights. "
                "To run PowerShell as Administrator, right-click PowerShell and select "
                "'Run as Administrator'.[/bold red]"
            )
            return UpgradeReport(outcome, target_version, None, output)

        if outcome is UpgradeOutcome.RELAUNCHED:
            self.console.print(
                "[yellow]You're not running this script with administrator privileges. "
                "A new elevated PowerShell window was opened to finish the upgrade; "
                "check it for results.[/yellow]"
            )
            return UpgradeReport(outcome, target_version, None, output)

        return self.verify(target_version, npm_service, output)

    def verify(self, target_version: str, npm_service, output: ProcessOutput) -> UpgradeReport:
        try:
            installed_version = npm_service.get_installed_version()
        except UpgraderError as exc:
            self.logger.error("Could not read the installed npm version: %s", exc)
            installed_version = "unknown"

        if installed_version == target_version:
            self.console.print(
                f"[green]Upgrade finished. Your new npm version is {installed_version}. "
                "Have a nice day![/green]"
            )
            return UpgradeReport(UpgradeOutcome.SUCCESS, target_version, installed_version, output)

        self.console.print(
            f"[bold red]You wanted to install npm {target_version}, but the installed "
            f"version is {installed_version}.[/bold red]"
        )
        self.console.print(
            "[red]A common reason is an attempted \"npm install npm\" or \"npm upgrade npm\". "
            "Please consider reporting your trouble to "
            f"{ISSUES_URL}, including the output below.[/red]"
        )
        self.dump_output(output)
        return UpgradeReport(
            UpgradeOutcome.MISMATCH_FAILURE, target_version, installed_version, output
        )

    def dump_output(self, output: ProcessOutput):
        self.console.print("[bold]Here is the output from the upgrader script:[/bold]")
        for line in output.stdout:
            self.console.print(escape(line))
        self.console.print("[bold]Here is the error output from the upgrader script:[/bold]")
        for line in output.stderr:
            self.console.print(f"[red]{escape(line)}[/red]")
