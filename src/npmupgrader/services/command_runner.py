"""Subprocess execution service for npm-windows-upgrade."""

import subprocess
import threading
from typing import Callable, List, Optional

from npmupgrader.errors import UpgraderError
from npmupgrader.models import ProcessOutput


class CommandRunner:
    """Runs external commands with consistent error handling."""

    def __init__(self, logger, subprocess_module=subprocess):
        self.logger = logger
        self.subprocess = subprocess_module

    def run(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
    ) -> subprocess.CompletedProcess:
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        try:
            result = self.subprocess.run(
                cmd,
                text=True,
                errors="replace",
                capture_output=capture_output,
            )
        except FileNotFoundError as exc:
            raise UpgraderError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except Exception as exc:
            raise UpgraderError(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if capture_output and result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0:
            return result

        stderr = (result.stderr or "").strip() if capture_output else ""
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        if check:
            raise UpgraderError(message)

        self.logger.debug(message)
        return result

    def stream(
        self,
        cmd: List[str],
        on_stderr: Optional[Callable[[str], None]] = None,
    ) -> ProcessOutput:
        """Runs ``cmd`` to completion, collecting both streams line by line.

        ``on_stderr`` is called with every error line as soon as it is read.
        """
        cmd_str = " ".join(cmd)
        self.logger.debug("Launching: %s", cmd_str)

        try:
            process = self.subprocess.Popen(
                cmd,
                stdout=self.subprocess.PIPE,
                stderr=self.subprocess.PIPE,
                text=True,
                errors="replace",
                bufsize=1,
            )
        except FileNotFoundError as exc:
            raise UpgraderError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except Exception as exc:
            raise UpgraderError(f"Failed to start process: {cmd_str}. {exc}") from exc

        stdout_lines: List[str] = []
        stderr_lines: List[str] = []

        def drain_stderr():
            for line in process.stderr:
                cleaned = line.rstrip()
                if not cleaned:
                    continue
                stderr_lines.append(cleaned)
                if on_stderr:
                    on_stderr(cleaned)

        # Both pipes must be drained together or a chatty stderr can block the child.
        stderr_reader = threading.Thread(target=drain_stderr, daemon=True)
        stderr_reader.start()

        try:
            for line in process.stdout:
                cleaned = line.rstrip()
                if not cleaned:
                    continue
                stdout_lines.append(cleaned)
                self.logger.debug(cleaned)
        except BaseException:
            process.kill()
            raise
        finally:
            process.wait()
            stderr_reader.join()

        self.logger.debug("Process exited with code %s: %s", process.returncode, cmd_str)
        return ProcessOutput(
            returncode=process.returncode,
            stdout=stdout_lines,
            stderr=stderr_lines,
        )
