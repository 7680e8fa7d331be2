"""CLI logging setup: per-infra prefixes on top of a plain message format."""

import logging
import sys

from dnse2e.redact import SecretRedactingFilter


class _InfraConsoleFormatter(logging.Formatter):
    """Console formatter for provisioning output.

    - ``dnse2e.clients.aks`` → ``[aks]``
    - ``infra.basic cluster`` → ``[basic cluster]``
    - ``root`` → no prefix (plain message)
    """

    def format(self, record):
        if record.name.startswith("dnse2e."):
            prefix = record.name.rsplit(".", 1)[-1]
        elif record.name.startswith("infra."):
            prefix = record.name.split(".", 1)[1]
        else:
            prefix = None
        message = super().format(record)
        return f"[{prefix}] {message}" if prefix else message


def setup_cli_logging(verbose=False):
    """Configure root logger for CLI commands.

    Library loggers get a short ``[module]`` prefix; per-infra loggers get
    ``[infra name]``. Azure SDK and aiohttp chatter is kept at WARNING unless
    *verbose* is set.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_InfraConsoleFormatter("%(message)s"))
    handler.addFilter(SecretRedactingFilter())
    root.addHandler(handler)

    if not verbose:
        logging.getLogger("azure").setLevel(logging.WARNING)
        logging.getLogger("aiohttp").setLevel(logging.WARNING)


def infra_logger(name: str) -> logging.Logger:
    """Get the logger used for one infra definition's provisioning run."""
    return logging.getLogger(f"infra.{name}")
