"""Cloud Storage access."""

import asyncio

from google.cloud import storage

from deployer.config import Settings
from deployer.utils.logging import get_logger

logger = get_logger(__name__)


class ConfigStore:
    """Reads the production configuration blob."""

    def __init__(self, settings: Settings, client: storage.Client | None = None):
        self._settings = settings
        self._client = client

    @property
    def client(self) -> storage.Client:
        # Created on first use so the app can start without credentials
        if self._client is None:
            self._client = storage.Client(project=self._settings.gcp_project_id)
        return self._client

    async def fetch_prod_config(self) -> str:
        """Download the production config as text. Single attempt."""
        blob = self.client.bucket(self._settings.config_bucket).blob(
            self._settings.config_object
        )
        text = await asyncio.to_thread(blob.download_as_text)
        logger.info(
            "storage.config_fetched",
            bucket=self._settings.config_bucket,
            object=self._settings.config_object,
            size=len(text),
        )
        return text
