"""Actionable error catalog for npm-windows-upgrade."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "unsupported_platform": {
        "what": "npm-windows-upgrade only runs on Windows (detected platform: {platform}).",
        "next": "On macOS or Linux, upgrade npm with `npm install -g npm@<version>`.",
    },
    "execution_policy_restricted": {
        "what": "Scripts cannot be executed on this system.",
        "next": (
            "Open PowerShell as Administrator, run `{command}` and start "
            "npm-windows-upgrade again."
        ),
    },
    "offline": {
        "what": "We have trouble connecting to the Internet. Aborting.",
        "next": "Check your network connection, proxy, or VPN and try again.",
    },
    "versions_unavailable": {
        "what": "We could not show latest available versions.",
        "next": (
            "Try running this script again with the version you want to install "
            "(npm-windows-upgrade --version:3.0.0)."
        ),
    },
    "tag_unresolved": {
        "what": "Could not resolve npm dist-tag '{tag}' to a version.",
        "next": "Pass an exact version instead, for example `--version:3.0.0`.",
    },
    "no_version_selected": {
        "what": "No version selected.",
        "next": "Pick a version from the list or pass `--version:<version>`.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
