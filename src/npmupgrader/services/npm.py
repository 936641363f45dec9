"""Queries against the installed npm and the npm registry."""

import json
import re
from typing import Callable, List, Optional

from packaging.version import InvalidVersion, Version

from npmupgrader.errors import GateError, UpgraderError
from npmupgrader.errors_catalog import actionable_error


# npm reports full MAJOR.MINOR.PATCH versions, never a leading "v".
SEMVER_PATTERN = re.compile(r"\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?")


class NpmService:
    """Wraps the npm commands used to inspect the current installation."""

    def __init__(self, logger, npm_command: str, run_cmd: Callable):
        self.logger = logger
        self.npm_command = npm_command
        self.run_cmd = run_cmd

    def _query(self, *args: str) -> str:
        result = self.run_cmd([self.npm_command, *args], check=True, capture_output=True)
        return (result.stdout or "").strip()

    def get_installed_version(self) -> str:
        return self._query("-v")

    def get_install_prefix(self) -> Optional[str]:
        """Returns npm's global prefix, or None when npm cannot report it."""
        try:
            prefix = self._query("config", "--global", "get", "prefix")
        except UpgraderError as exc:
            self.logger.info(
                "Could not determine npm's install location, using the default: %s", exc
            )
            return None
        return prefix or None

    def get_available_versions(self) -> List[str]:
        try:
            raw = self._query("view", "npm", "versions", "--json")
            versions = json.loads(raw)
        except (UpgraderError, ValueError) as exc:
            self.logger.debug("Registry query failed: %s", exc)
            raise GateError(actionable_error("versions_unavailable")) from exc

        if not isinstance(versions, list) or not all(isinstance(v, str) for v in versions):
            raise GateError(actionable_error("versions_unavailable"))
        return versions

    @staticmethod
    def is_exact_version(value: str) -> bool:
        """True for a complete semver that `npm -v` could print verbatim.

        Partial versions such as `3` or `3.0` and prefixed ones such as `v3.0.0`
        go through `resolve_tag` instead.
        """
        if not SEMVER_PATTERN.fullmatch(value):
            return False
        try:
            Version(value)
        except InvalidVersion:
            return False
        return True

    def resolve_tag(self, tag: str) -> str:
        try:
            resolved = self._query("view", f"npm@{tag}", "version")
        except UpgraderError as exc:
            raise GateError(actionable_error("tag_unresolved", tag=tag)) from exc

        if not resolved:
            raise GateError(actionable_error("tag_unresolved", tag=tag))
        # npm prints one line per match for ranges; the last one is the newest.
        return resolved.splitlines()[-1].split()[-1].strip("'\"")
