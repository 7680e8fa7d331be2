"""Exception types raised by dnse2e."""


class Dnse2eError(Exception):
    """Base class for all dnse2e errors."""


class ConfigError(Dnse2eError):
    """Invalid infra definition or missing configuration."""


class ArmError(Dnse2eError):
    """An Azure Resource Manager request or long-running operation failed."""

    def __init__(self, message, status_code=None, operation=None):
        super().__init__(message)
        self.status_code = status_code
        self.operation = operation


class CommandError(Dnse2eError):
    """A run-command invocation on the cluster failed."""


class NonZeroExitError(CommandError):
    """The remote command ran but exited with a non-zero code.

    This is an expected outcome for condition probes; callers branch on it.
    """

    def __init__(self, command, result):
        super().__init__(f"command {command!r} exited with code {result.exit_code}")
        self.command = command
        self.result = result


class ManifestError(Dnse2eError):
    """A manifest could not be serialized."""


class StabilityError(Dnse2eError):
    """A deployed workload did not become stable."""


class JobFailedError(StabilityError):
    """A Job reached its Failed condition."""


class StabilityTimeoutError(StabilityError):
    """A Job did not reach a terminal condition before the deadline."""


class SnapshotError(Dnse2eError):
    """A provisioned-infrastructure snapshot could not be saved or loaded."""


class ProvisioningError(Dnse2eError):
    """Provisioning an infrastructure definition failed."""
