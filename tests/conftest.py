"""Shared pytest fixtures for all test modules."""

import os
import subprocess
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

from dnse2e.clients.aks import Aks
from dnse2e.clients.arm import CLIENT_TYPES, ArmClients
from dnse2e.clients.run_command import CommandResult
from dnse2e.errors import NonZeroExitError

PROJECT_ROOT = os.path.normpath(os.path.join(os.path.dirname(__file__), ".."))

SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000001"
TENANT_ID = "00000000-0000-0000-0000-0000000000aa"
RESOURCE_GROUP = "externalDns-e2e-test"


@pytest.fixture(scope="session")
def project_root():
    """Absolute path to the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def run_cli(project_root):
    """Return a callable that invokes the dnse2e CLI as a subprocess."""

    def _run(*args, env=None):
        result = subprocess.run(
            [sys.executable, "-m", "dnse2e.dnse2e", *args],
            capture_output=True,
            text=True,
            cwd=project_root,
            env={**os.environ, **(env or {})},
        )
        return result.returncode, result.stdout, result.stderr

    return _run


# ── SDK fixtures ────────────────────────────────────────────────────


class SdkClients:
    """One MagicMock management client per kind, shared across subscriptions.

    ``created`` records ``(kind, subscription_id, kwargs)`` for every client
    ArmClients builds through ``factories()``.
    """

    def __init__(self):
        self.created = []
        self.clients = {}
        for kind in CLIENT_TYPES:
            client = MagicMock()
            client.close = AsyncMock()
            self.clients[kind] = client

    def __getitem__(self, kind):
        return self.clients[kind]

    @staticmethod
    def poller(result):
        """Fake long-running operation poller whose ``result()`` returns *result*."""
        p = MagicMock()
        p.result = AsyncMock(return_value=result)
        return p

    def begin(self, result):
        """AsyncMock standing in for a ``begin_*`` method that resolves to *result*."""
        return AsyncMock(return_value=self.poller(result))

    def factories(self):
        return {kind: self._factory(kind) for kind in CLIENT_TYPES}

    def _factory(self, kind):
        def _make(credential, subscription_id, **kwargs):
            self.created.append((kind, subscription_id, kwargs))
            return self.clients[kind]

        return _make


@pytest.fixture
def sdk():
    return SdkClients()


@pytest.fixture
def arm(sdk):
    """ArmClients handing out the ``sdk`` fixture's mocks."""
    return ArmClients(MagicMock(), base_url="https://arm.test", factories=sdk.factories())


# ── Cluster / channel fixtures ──────────────────────────────────────


@pytest.fixture
def cluster():
    rid = (
        f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{RESOURCE_GROUP}"
        "/providers/Microsoft.ContainerService/managedClusters/clustertest"
    )
    return Aks(
        id=rid,
        name="clustertest",
        resource_group=RESOURCE_GROUP,
        subscription_id=SUBSCRIPTION_ID,
        location="westus",
        dns_service_ip="10.0.0.10",
        principal_id="principal-1",
        client_id="client-1",
        options=frozenset(),
    )


class ScriptedChannel:
    """Fake RemoteCommandChannel.

    ``script`` maps a command prefix to a list of exit codes consumed in
    order (the last one repeats). Unscripted commands exit 0.
    """

    def __init__(self, script=None, logs="job output\n"):
        self.script = {k: list(v) for k, v in (script or {}).items()}
        self.logs = logs
        self.calls = []

    def _exit_code(self, command):
        for prefix, codes in self.script.items():
            if command.startswith(prefix):
                code = codes[0]
                if len(codes) > 1:
                    codes.pop(0)
                if isinstance(code, BaseException):
                    raise code
                return code
        return 0

    async def run_command(self, cluster, command, context=None, output_file=None):
        self.calls.append((command, context, output_file))
        result = CommandResult(logs=self.logs, exit_code=self._exit_code(command))
        if output_file:
            with open(output_file, "a", encoding="utf-8") as f:
                f.write(result.logs)
        if result.exit_code != 0:
            raise NonZeroExitError(command, result)
        return result

    def commands(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def make_channel():
    return ScriptedChannel
