"""Lazily constructed credential shared by every management client.

The underlying azure-identity credential is created at most once per
provider, even when many clients ask for a token at the same time. Token
caching is left to the SDK's bearer token policy. One provider is
constructed by the caller and passed down to every client that needs it.
"""

import asyncio
import logging

logger = logging.getLogger(__name__)


def _default_credential_factory():
    from azure.identity.aio import AzureCliCredential

    return AzureCliCredential()


class CredentialProvider:
    """Async token credential that defers creating the real credential.

    Args:
        credential_factory: zero-arg callable returning an azure-identity
            async credential. Called at most once.
    """

    def __init__(self, credential_factory=None):
        self._factory = credential_factory or _default_credential_factory
        self._credential = None
        self._lock = asyncio.Lock()

    async def _get_credential(self):
        async with self._lock:
            if self._credential is None:
                logger.debug("Creating Azure credential")
                self._credential = self._factory()
        return self._credential

    async def get_token(self, *scopes, **kwargs):
        """Return an ``AccessToken`` for *scopes* from the underlying credential."""
        credential = await self._get_credential()
        return await credential.get_token(*scopes, **kwargs)

    async def close(self):
        if self._credential is not None:
            await self._credential.close()
