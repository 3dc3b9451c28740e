"""In-memory stand-ins for CircleCI, IAM and Cloud Storage."""

import base64
import json
from collections import defaultdict
from typing import Any

import httpx

CIRCLE_PREFIX = "/api/v1.1"
PROD_PROJECT = "bvdp-saturn-prod"
KEY_NAME = f"projects/{PROD_PROJECT}/serviceAccounts/sa/keys/abc123"
KEY_JSON = '{"type": "service_account", "private_key_id": "abc123"}'


def circle_project(repo: str, last_success: int | None) -> dict[str, Any]:
    """A `/projects` entry as CircleCI returns it."""
    branches = {}
    if last_success is not None:
        branches["dev"] = {"last_success": {"build_num": last_success}}
    return {
        "reponame": repo,
        "vcs_url": f"https://github.com/DataBiosphere/{repo}",
        "branches": branches,
    }


def circle_build(
    build_num: int,
    job_name: str | None = "build",
    previous: int | None = None,
    outcome: str | None = "success",
) -> dict[str, Any]:
    """A single build payload as CircleCI returns it."""
    return {
        "build_num": build_num,
        "workflows": {"job_name": job_name} if job_name else None,
        "outcome": outcome,
        "previous_successful_build": {"build_num": previous} if previous else None,
    }


class CircleStub:
    """In-memory CircleCI v1.1 API behind `httpx.MockTransport`.

    `builds[(repo, num)]` is a list of payloads; each fetch takes the next
    one and the last one repeats.
    """

    def __init__(self):
        self.projects: list[dict[str, Any]] = []
        self.builds: dict[tuple[str, int], list[dict[str, Any]]] = {}
        self.artifacts: dict[tuple[str, int], list[dict[str, Any]]] = {}
        self.submit_status = 201
        self.submit_body: Any = {"build_num": 42}
        self.requests: list[httpx.Request] = []
        self.fetches: dict[tuple[str, int], int] = defaultdict(int)
        self.submitted: list[dict[str, Any]] = []

    def add_build(self, repo: str, *payloads: dict[str, Any]) -> None:
        self.builds[(repo, payloads[0]["build_num"])] = list(payloads)

    @property
    def build_fetch_count(self) -> int:
        return sum(self.fetches.values())

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(CIRCLE_PREFIX)
        parts = path.strip("/").split("/")

        if path == "/projects":
            return httpx.Response(200, json=self.projects)

        # project/github/<org>/<repo>/...
        repo, rest = parts[3], parts[4:]
        if request.method == "POST" and rest[:1] == ["tree"]:
            self.submitted.append(json.loads(request.content))
            body = self.submit_body
            if isinstance(body, str):
                return httpx.Response(self.submit_status, text=body)
            return httpx.Response(self.submit_status, json=body)

        key = (repo, int(rest[0]))
        if rest[1:] == ["artifacts"]:
            return httpx.Response(200, json=self.artifacts.get(key, []))

        self.fetches[key] += 1
        payloads = self.builds.get(key)
        if not payloads:
            return httpx.Response(404, json={"message": "Build not found"})
        payload = payloads.pop(0) if len(payloads) > 1 else payloads[0]
        return httpx.Response(200, json=payload)


class FakeIdentity:
    """Stands in for `GoogleIdentity`."""

    def __init__(self, project_id: str | None = PROD_PROJECT):
        self._project_id = project_id
        self.calls = 0

    async def credentials(self) -> tuple[Any, str | None]:
        self.calls += 1
        return object(), self._project_id

    async def project_id(self) -> str | None:
        self.calls += 1
        return self._project_id


class FakeKeyClient:
    """Records IAM key calls."""

    def __init__(
        self,
        fail_create: Exception | None = None,
        fail_delete: Exception | None = None,
        response: dict[str, Any] | None = None,
    ):
        self.fail_create = fail_create
        self.fail_delete = fail_delete
        self.response = response or {
            "name": KEY_NAME,
            "privateKeyData": base64.b64encode(KEY_JSON.encode()).decode(),
        }
        self.created: list[str] = []
        self.deleted: list[str] = []

    def create_key(self, service_account: str) -> dict[str, Any]:
        if self.fail_create:
            raise self.fail_create
        self.created.append(service_account)
        return dict(self.response)

    def delete_key(self, name: str) -> None:
        self.deleted.append(name)
        if self.fail_delete:
            raise self.fail_delete


class FakeConfigStore:
    def __init__(self, text: str = '{"env": "prod"}'):
        self.text = text
        self.calls = 0

    async def fetch_prod_config(self) -> str:
        self.calls += 1
        return self.text


class FakeBlob:
    def __init__(self, bucket: "FakeBucket", name: str):
        self.bucket = bucket
        self.name = name

    def upload_from_string(self, data: str, content_type: str, predefined_acl: str) -> None:
        self.bucket.uploads[self.name] = {
            "data": data,
            "content_type": content_type,
            "predefined_acl": predefined_acl,
        }

    def download_as_text(self) -> str:
        return self.bucket.objects[self.name]


class FakeBucket:
    def __init__(self, name: str):
        self.name = name
        self.objects: dict[str, str] = {}
        self.uploads: dict[str, dict[str, Any]] = {}

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self, name)


class FakeStorageClient:
    """Enough of `google.cloud.storage.Client` for the deployer."""

    def __init__(self):
        self.buckets: dict[str, FakeBucket] = {}

    def bucket(self, name: str) -> FakeBucket:
        return self.buckets.setdefault(name, FakeBucket(name))


