"""Domain errors for npm-windows-upgrade."""


class UpgraderError(RuntimeError):
    """Raised when the upgrade cannot continue safely."""


class PlatformNotSupportedError(UpgraderError):
    """Raised when the host is not Windows. Never handled by the pipeline."""


class GateError(UpgraderError):
    """A precondition failed and the run stops without upgrading."""
