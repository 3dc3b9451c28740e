"""Application default credentials."""

import asyncio

import google.auth
from google.auth.credentials import Credentials

from deployer.config import Settings


class GoogleIdentity:
    """Scoped caller identity for Google APIs.

    On App Engine the default credentials already carry the runtime service
    account; locally they come from `gcloud auth application-default login`.
    `google.auth.default` applies the scopes in both cases.
    """

    def __init__(self, settings: Settings):
        self._scopes = list(settings.gcp_scopes)
        self._project_override = settings.gcp_project_id

    async def credentials(self) -> tuple[Credentials, str | None]:
        """Scoped credentials and the project they belong to."""
        credentials, project_id = await asyncio.to_thread(
            google.auth.default, scopes=self._scopes
        )
        return credentials, self._project_override or project_id

    async def project_id(self) -> str | None:
        """Project the service runs in."""
        if self._project_override:
            return self._project_override
        _, project_id = await self.credentials()
        return project_id
