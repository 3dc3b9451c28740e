"""Publishes the network download price for the UI's cost estimates."""

import asyncio
import json
from typing import Any

import httpx
from google.cloud import storage

from deployer.config import Settings
from deployer.core.exceptions import PricingError
from deployer.utils.logging import get_logger

logger = get_logger(__name__)


class PricePublisher:
    """Copies one SKU's pricing info from the billing catalog to a bucket."""

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
        storage_client: storage.Client | None = None,
    ):
        self._settings = settings
        self._http_client = http_client
        self._storage_client = storage_client

    @property
    def storage_client(self) -> storage.Client:
        if self._storage_client is None:
            self._storage_client = storage.Client(project=self._settings.gcp_project_id)
        return self._storage_client

    async def fetch_download_price(self) -> dict[str, Any]:
        """First pricing info entry of the configured SKU.

        Raises:
            PricingError: If the catalog does not list the SKU
        """
        url = (
            f"{self._settings.billing_base_url}/services/"
            f"{self._settings.billing_service_id}/skus"
        )
        params = {
            "fields": "skus(pricingInfo,skuId)",
            "key": self._settings.google_cloud_billing_key,
        }
        if self._http_client is not None:
            response = await self._http_client.get(url, params=params)
        else:
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.get(url, params=params)
        response.raise_for_status()

        sku_id = self._settings.download_price_sku
        for sku in response.json().get("skus", []):
            if sku.get("skuId") == sku_id and sku.get("pricingInfo"):
                return sku["pricingInfo"][0]
        raise PricingError(f"SKU {sku_id} not found", {"skuId": sku_id})

    async def publish(self) -> dict[str, Any]:
        """Fetch the download price and store it as a public JSON object."""
        price = await self.fetch_download_price()
        blob = self.storage_client.bucket(self._settings.pricing_bucket).blob(
            self._settings.pricing_object
        )
        await asyncio.to_thread(
            blob.upload_from_string,
            json.dumps(price),
            content_type="application/json",
            predefined_acl="publicRead",
        )
        logger.info(
            "pricing.published",
            bucket=self._settings.pricing_bucket,
            object=self._settings.pricing_object,
        )
        return price
