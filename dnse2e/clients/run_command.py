"""Run shell commands on an AKS cluster through the managed run-command API.

The command executes in a short-lived pod with ``kubectl`` and cluster
credentials. Any payload passed as ``context`` (a base64 zip) is unpacked
into the pod's working directory before the command starts.
"""

import logging
from dataclasses import dataclass

from azure.mgmt.containerservice.models import RunCommandRequest

from dnse2e.clients.arm import long_running
from dnse2e.errors import CommandError, NonZeroExitError
from dnse2e.redact import redact_secrets

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    logs: str
    exit_code: int


class RemoteCommandChannel:
    """Submit run-command operations and classify the outcome by exit code.

    Args:
        arm: ArmClients supplying the container service client for each
            cluster's subscription.
    """

    def __init__(self, arm):
        self.arm = arm

    async def run_command(self, cluster, command, context=None, output_file=None) -> CommandResult:
        """Run *command* on *cluster* and wait for it to finish.

        Args:
            cluster: target ``Aks`` handle.
            command: literal shell command, e.g. ``kubectl apply -f manifests/``.
            context: optional base64 zip payload staged for the command.
            output_file: if set, logs are appended to this file (with
                secrets redacted) instead of being logged.

        Returns:
            CommandResult with captured logs and a zero exit code.

        Raises:
            NonZeroExitError: command ran and exited non-zero; carries the result.
            CommandError: the operation finished without an exit code.
            ArmError: submission or polling failed.
        """
        log = logging.getLogger(f"{__name__}.{cluster.name}")
        log.info(f"Running command: {command}")

        containers = self.arm.containers(cluster.subscription_id)
        response = await long_running(
            f"run command on {cluster.name}",
            containers.managed_clusters.begin_run_command(
                cluster.resource_group, cluster.name, RunCommandRequest(command=command, context=context)
            ),
        )
        if response.exit_code is None:
            raise CommandError(f"command {command!r} on {cluster.name} finished without an exit code")
        result = CommandResult(logs=response.logs or "", exit_code=int(response.exit_code))

        if output_file:
            with open(output_file, "a", encoding="utf-8") as f:
                f.write(redact_secrets(result.logs))
        elif result.logs:
            log.info(f"Command output:\n{result.logs.rstrip()}")

        if result.exit_code != 0:
            log.info(f"Command failed with exit code {result.exit_code}")
            raise NonZeroExitError(command, result)

        return result
