"""CircleCI REST client.

Thin wrapper over `httpx.AsyncClient` for the v1.1 API. The access token
travels as the `circle-token` query parameter on every call. The client does
not retry; callers own their retry budgets.
"""

import json
from dataclasses import dataclass
from typing import Any

import httpx

from deployer.config import Settings
from deployer.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CircleResponse:
    """Fully buffered CircleCI response."""

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code <= 299

    def json(self) -> Any:
        return json.loads(self.body)


class CircleClient:
    """Authenticated CircleCI client."""

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._settings = settings
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=settings.circle_request_timeout
        )

    async def __aenter__(self) -> "CircleClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    def project_path(self, repo_name: str, *parts: str | int) -> str:
        """Path of a project resource, e.g. `/project/github/<org>/<repo>/42`."""
        segments = [
            "project",
            self._settings.circle_vcs_type,
            self._settings.circle_org,
            repo_name,
            *(str(part) for part in parts),
        ]
        return "/" + "/".join(segments)

    async def request(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None = None,
        body: str | None = None,
    ) -> CircleResponse:
        """Send a request and buffer the whole response body."""
        request_headers = dict(headers or {})
        request_headers["Accept"] = "*/*"

        logger.debug("circle.request", method=method, path=path)
        response = await self._http.request(
            method,
            self._settings.circle_base_url + path,
            params={"circle-token": self._settings.circle_api_token},
            headers=request_headers,
            content=body,
        )
        logger.debug(
            "circle.response",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return CircleResponse(status_code=response.status_code, body=response.text)

    async def get_json(self, path: str) -> Any:
        response = await self.request("GET", path)
        return response.json()

    async def post_json(self, path: str, payload: dict[str, Any]) -> CircleResponse:
        return await self.request(
            "POST",
            path,
            headers={"Content-Type": "application/json"},
            body=json.dumps(payload, indent=2) + "\n",
        )
