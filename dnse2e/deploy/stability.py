"""Wait for applied workloads to become stable on an AKS cluster.

Every check is a ``kubectl`` command sent through the run-command channel:

- Deployment / StatefulSet / DaemonSet: ``kubectl rollout status``
- Pod: ``kubectl wait --for=condition=Ready``
- Job: poll the complete and failed conditions with short timeouts until
  one resolves, then save the job's logs to ``job-<name>.log``
- anything else is stable once applied
"""

import asyncio
import logging
import os

from dnse2e.errors import ArmError, CommandError, JobFailedError, NonZeroExitError, StabilityError, StabilityTimeoutError
from dnse2e.manifests.common import obj_kind, obj_name, obj_namespace

logger = logging.getLogger(__name__)

WORKLOAD_KINDS = ("Deployment", "StatefulSet", "DaemonSet")
PROBE_TIMEOUT = 5


class StabilityWaiter:
    """Per-kind stability checks, run concurrently over a list of objects.

    Args:
        channel: RemoteCommandChannel used for every probe.
        log_dir: directory receiving ``job-<name>.log`` files.
        probe_timeout: ``--timeout`` seconds for each Job condition probe.
        job_timeout: optional overall bound on a Job wait in seconds;
            None polls until the job completes or fails.
    """

    def __init__(self, channel, log_dir=".", probe_timeout=PROBE_TIMEOUT, job_timeout=None):
        self.channel = channel
        self.log_dir = log_dir
        self.probe_timeout = probe_timeout
        self.job_timeout = job_timeout

    async def wait_stable(self, cluster, objs):
        """Wait for every object in *objs*; all waits finish before any error is raised.

        Raises:
            StabilityError: the first failing object's error, in input order.
        """
        log = logging.getLogger(f"{__name__}.{cluster.name}")
        log.info(f"Waiting for {len(objs)} resources to be stable...")

        results = await asyncio.gather(*(self._wait_one(cluster, obj) for obj in objs), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result

        log.info("All resources stable.")

    async def _wait_one(self, cluster, obj):
        kind = obj_kind(obj)
        name = obj_name(obj)
        ns = obj_namespace(obj)

        if kind in WORKLOAD_KINDS:
            logger.info(f"Checking rollout status of {kind}/{name}...")
            await self._probe(f"kubectl rollout status {kind}/{name} -n {ns}", cluster, kind, name)
        elif kind == "Pod":
            logger.info(f"Waiting for pod/{name} to be ready...")
            await self._probe(f"kubectl wait --for=condition=Ready pod/{name} -n {ns}", cluster, kind, name)
        elif kind == "Job":
            await self._wait_job(cluster, name, ns)

    async def _probe(self, command, cluster, kind, name):
        try:
            await self.channel.run_command(cluster, command)
        except (ArmError, CommandError) as e:
            raise StabilityError(f"waiting for {kind}/{name} to be stable: {e}") from e

    def job_log_file(self, name):
        return os.path.join(self.log_dir, f"job-{name}.log")

    async def _wait_job(self, cluster, name, ns):
        logger.info(f"Waiting for job/{name} to complete...")
        log_file = self.job_log_file(name)
        try:
            os.remove(log_file)
        except FileNotFoundError:
            pass

        try:
            failed = await self._poll_job(cluster, name, ns)
        except Exception as e:
            try:
                await self._capture_job_logs(cluster, name, ns, log_file)
            except Exception as log_err:
                logger.warning(f"Could not capture logs for job/{name}: {log_err}")
            if isinstance(e, StabilityError):
                raise
            raise StabilityError(f"waiting for job/{name} to complete: {e}") from e

        try:
            await self._capture_job_logs(cluster, name, ns, log_file)
        except Exception as e:
            if not failed:
                raise StabilityError(f"getting logs for job/{name}: {e}") from e
            logger.warning(f"Could not capture logs for job/{name}: {e}")

        if failed:
            raise JobFailedError(f"job/{name} failed")
        logger.info(f"Job/{name} complete, logs saved to {log_file}")

    async def _poll_job(self, cluster, name, ns):
        """Alternate complete/failed condition probes. Returns True if the job failed."""
        deadline = None
        if self.job_timeout is not None:
            deadline = asyncio.get_running_loop().time() + self.job_timeout

        while True:
            if await self._job_condition(cluster, "complete", name, ns):
                return False
            if await self._job_condition(cluster, "failed", name, ns):
                return True
            if deadline is not None and asyncio.get_running_loop().time() >= deadline:
                raise StabilityTimeoutError(f"job/{name} did not finish within {self.job_timeout}s")

    async def _job_condition(self, cluster, condition, name, ns):
        command = f"kubectl wait --for=condition={condition} --timeout={self.probe_timeout}s job/{name} -n {ns}"
        try:
            await self.channel.run_command(cluster, command)
        except NonZeroExitError:
            return False
        return True

    async def _capture_job_logs(self, cluster, name, ns, log_file):
        await self.channel.run_command(cluster, f"kubectl logs job/{name} -n {ns}", output_file=log_file)
