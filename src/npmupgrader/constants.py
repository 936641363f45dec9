"""Shared constants for npm-windows-upgrade."""

import os

SUPPORTED_PLATFORM = "win32"

DEFAULT_NPM_COMMAND = "npm"
DEFAULT_POWERSHELL_COMMAND = "powershell.exe"
DEFAULT_DNS_HOST = "microsoft.com"
DEFAULT_CONFIG_FILE = ".npmupgrader.yml"

UNRESTRICTED_POLICY_TOKEN = "Unrestricted"
POLICY_REMEDIATION_COMMAND = "Set-ExecutionPolicy Unrestricted -Scope CurrentUser -Force"

ADMIN_REQUIRED_MARKER = "you must be administrator"
RELAUNCH_MARKER = "we need to relaunch this script as administrator"

ISSUES_URL = "https://github.com/felixrieseberg/npm-windows-upgrade/issues"

BUNDLED_SCRIPT_PATH = os.path.join(os.path.dirname(__file__), "scripts", "upgrade-npm.ps1")
