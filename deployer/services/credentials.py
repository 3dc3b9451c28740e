"""Short-lived service account keys.

The deploy job needs credentials for the App Engine default service account.
A key is created right before the job is submitted and deleted as soon as the
job is done with it, whatever the outcome.
"""

import asyncio
import base64
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Protocol, TypeVar

from google.auth.credentials import Credentials
from google.auth.exceptions import GoogleAuthError
from googleapiclient import discovery
from googleapiclient.errors import HttpError

from deployer.core.exceptions import CredentialError
from deployer.models.deployment import ServiceAccountKey
from deployer.services.google_auth import GoogleIdentity
from deployer.utils.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class KeyClient(Protocol):
    def create_key(self, service_account: str) -> dict[str, Any]: ...

    def delete_key(self, name: str) -> None: ...


class IamKeyClient:
    """Blocking IAM v1 client for service account keys."""

    def __init__(self, credentials: Credentials):
        self._service = discovery.build(
            "iam", "v1", credentials=credentials, cache_discovery=False
        )

    def create_key(self, service_account: str) -> dict[str, Any]:
        keys = self._service.projects().serviceAccounts().keys()
        return keys.create(name=service_account, body={}).execute()

    def delete_key(self, name: str) -> None:
        keys = self._service.projects().serviceAccounts().keys()
        keys.delete(name=name).execute()


def app_engine_service_account(project_id: str) -> str:
    return f"projects/-/serviceAccounts/{project_id}@appspot.gserviceaccount.com"


class ServiceAccountKeyBroker:
    """Creates a key, lends it out, and revokes it."""

    def __init__(
        self,
        identity: GoogleIdentity,
        key_client_factory: Callable[[Credentials], KeyClient] = IamKeyClient,
    ):
        self._identity = identity
        self._key_client_factory = key_client_factory

    @asynccontextmanager
    async def scoped_key(self) -> AsyncIterator[ServiceAccountKey]:
        """Yield a fresh key for the App Engine default service account.

        The key is revoked exactly once when the block exits, normally or by
        exception. A failed revocation is logged; it never replaces the
        error raised inside the block.

        Raises:
            CredentialError: If the key cannot be created
        """
        credentials, project_id = await self._identity.credentials()
        if not project_id:
            raise CredentialError("App Engine default service account", "unknown project")
        service_account = app_engine_service_account(project_id)
        try:
            client = self._key_client_factory(credentials)
            response = await asyncio.to_thread(client.create_key, service_account)
        except (HttpError, GoogleAuthError) as e:
            raise CredentialError(service_account, str(e)) from e

        try:
            key = ServiceAccountKey(
                name=response["name"],
                key_json=base64.b64decode(response["privateKeyData"], validate=True).decode(),
            )
        except (KeyError, ValueError) as e:
            # The key exists in IAM even though its payload is unusable
            if response.get("name"):
                await self._revoke(client, response["name"])
            raise CredentialError(service_account, f"malformed key response: {e}") from e

        logger.info("credentials.key_created", key=key.name)
        try:
            yield key
        finally:
            await self._revoke(client, key.name)

    async def with_scoped_key(self, action: Callable[[str], Awaitable[T]]) -> T:
        """Run `action(key_json)` with a key that is revoked afterwards."""
        async with self.scoped_key() as key:
            return await action(key.key_json)

    async def _revoke(self, client: KeyClient, name: str) -> None:
        try:
            await asyncio.to_thread(client.delete_key, name)
        except Exception:
            logger.exception("credentials.revoke_failed", key=name)
        else:
            logger.info("credentials.key_revoked", key=name)
