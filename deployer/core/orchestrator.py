"""Deploy Orchestrator.

Pushes the newest dev build of a project to production:

1. find the last successful `build` job on the tracked branch
2. take its first artifact
3. fetch the production config (API only)
4. submit a `deploy-prod` job with a short-lived service account key
5. poll the job until it reports an outcome
"""

import asyncio
from typing import Awaitable, Callable

from deployer.config import Settings
from deployer.core.exceptions import (
    DeployTimeoutError,
    PollTimeoutError,
    UpstreamError,
)
from deployer.core.polling import poll_until
from deployer.models.build import Build
from deployer.models.deployment import DeployRequest, DeployResult, DeployTarget
from deployer.services.builds import (
    find_last_successful_build,
    get_build,
    get_first_artifact_url,
)
from deployer.services.circle import CircleClient
from deployer.services.credentials import ServiceAccountKeyBroker
from deployer.services.google_auth import GoogleIdentity
from deployer.services.storage import ConfigStore
from deployer.utils.logging import get_logger


class DeployOrchestrator:
    """Runs production deploys.

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        settings: Settings,
        circle: CircleClient,
        broker: ServiceAccountKeyBroker,
        config_store: ConfigStore,
        identity: GoogleIdentity,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings
        self.circle = circle
        self.broker = broker
        self.config_store = config_store
        self.identity = identity
        self._sleep = sleep
        self.logger = get_logger("orchestrator")

    async def deploy(self, target: DeployTarget) -> DeployResult:
        """Deploy `target` and wait for the deploy job to finish.

        Raises:
            ProjectNotFoundError: If CircleCI does not follow the repository
            BuildNotFoundError: If no eligible build is found
            NoArtifactsError: If the build has no artifacts
            CredentialError: If the service account key cannot be created
            UpstreamError: If CircleCI rejects the deploy job
            DeployTimeoutError: If the deploy job does not finish in time
        """
        repo = target.repo_name
        self.logger.info("deploy.started", repo=repo)

        build = await find_last_successful_build(self.circle, self.settings, repo)
        artifact_url = await get_first_artifact_url(self.circle, repo, build)
        self.logger.info(
            "deploy.artifact_resolved",
            repo=repo,
            build_num=build.build_num,
            artifact_url=artifact_url,
        )

        config_json = None
        if target.include_config:
            config_json = await self.config_store.fetch_prod_config()

        async with self.broker.scoped_key() as key:
            request = DeployRequest(
                artifact_url=artifact_url,
                config_json=config_json,
                sa_key_json=key.key_json,
            )
            deploy_build_num = await self._submit(repo, request)
            finished = await self._wait_for_outcome(repo, deploy_build_num)

        self.logger.info(
            "deploy.completed",
            repo=repo,
            deploy_build_num=deploy_build_num,
            outcome=finished.outcome,
        )
        return DeployResult(
            repo_name=repo,
            source_build_num=build.build_num,
            deploy_build_num=deploy_build_num,
            outcome=finished.outcome or "",
            artifact_url=artifact_url,
        )

    async def _submit(self, repo: str, request: DeployRequest) -> int:
        """Submit the deploy job and return its build number."""
        response = await self.circle.post_json(
            self.circle.project_path(repo, "tree", self.settings.circle_branch),
            request.to_build_parameters(self.settings.circle_deploy_job),
        )
        if not response.ok:
            self.logger.error(
                "deploy.submit_rejected",
                repo=repo,
                status_code=response.status_code,
            )
            raise UpstreamError(response.status_code, response.body)

        build_num = response.json()["build_num"]
        self.logger.info("deploy.submitted", repo=repo, deploy_build_num=build_num)
        return build_num

    async def _wait_for_outcome(self, repo: str, build_num: int) -> Build:
        try:
            return await poll_until(
                lambda: get_build(self.circle, repo, build_num),
                lambda build: build.has_outcome,
                interval=self.settings.poll_interval_seconds,
                max_attempts=self.settings.poll_max_attempts,
                sleep=self._sleep,
            )
        except PollTimeoutError as e:
            self.logger.error(
                "deploy.timeout",
                repo=repo,
                deploy_build_num=build_num,
                attempts=e.attempts,
            )
            raise DeployTimeoutError(build_num) from e
