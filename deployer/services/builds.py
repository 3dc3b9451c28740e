"""Build lookup on CircleCI.

Resolves the newest successful `build` job of a project and the artifact it
produced. CircleCI records a workflow's jobs as separate builds, so the newest
successful build on a branch may be some other job (tests, lint, ...). The
locator walks `previous_successful_build` links back until it finds the
expected job, within a fixed budget.
"""

from deployer.config import Settings
from deployer.core.exceptions import (
    BuildNotFoundError,
    NoArtifactsError,
    ProjectNotFoundError,
)
from deployer.models.build import Artifact, Build, CircleProject
from deployer.services.circle import CircleClient
from deployer.utils.logging import get_logger

logger = get_logger(__name__)


async def find_project(
    circle: CircleClient, settings: Settings, repo_name: str
) -> CircleProject:
    """Find the followed project whose VCS URL matches `repo_name`.

    Raises:
        ProjectNotFoundError: If no followed project matches
    """
    repo_url = f"{settings.circle_repo_url_prefix}/{repo_name}"
    projects = await circle.get_json("/projects")
    for payload in projects:
        if payload.get("vcs_url") == repo_url:
            return CircleProject.from_circle(payload)
    raise ProjectNotFoundError(repo_url)


async def get_build(circle: CircleClient, repo_name: str, build_num: int) -> Build:
    payload = await circle.get_json(circle.project_path(repo_name, build_num))
    return Build.from_circle(payload)


async def find_build(
    circle: CircleClient,
    repo_name: str,
    build_num: int,
    max_attempts: int,
    job_name: str = "build",
) -> Build:
    """Walk back from `build_num` to the first build of `job_name`.

    Fetches at most `max_attempts + 1` builds.

    Raises:
        BuildNotFoundError: If the budget runs out or the chain ends first
    """
    current: int | None = build_num
    last_fetched = build_num
    for attempt in range(max_attempts + 1):
        if current is None:
            break
        build = await get_build(circle, repo_name, current)
        last_fetched = build.build_num
        if build.job_name == job_name:
            logger.info(
                "builds.found",
                repo=repo_name,
                build_num=build.build_num,
                attempts=attempt + 1,
            )
            return build
        logger.debug(
            "builds.skipped",
            repo=repo_name,
            build_num=build.build_num,
            job_name=build.job_name,
        )
        current = build.previous_successful_build_num
    raise BuildNotFoundError(last_fetched)


async def find_last_successful_build(
    circle: CircleClient, settings: Settings, repo_name: str
) -> Build:
    """Newest successful build job on the tracked branch."""
    project = await find_project(circle, settings, repo_name)
    start = project.last_success(settings.circle_branch)
    if start is None:
        raise BuildNotFoundError(None)
    return await find_build(
        circle,
        project.reponame,
        start,
        settings.build_search_max_attempts,
        job_name=settings.circle_build_job,
    )


async def get_first_artifact_url(
    circle: CircleClient, repo_name: str, build: Build
) -> str:
    """URL of the first artifact, in the order CircleCI lists them.

    Raises:
        NoArtifactsError: If the build has no artifacts
    """
    payload = await circle.get_json(
        circle.project_path(repo_name, build.build_num, "artifacts")
    )
    artifacts = [Artifact.model_validate(item) for item in payload]
    if not artifacts:
        raise NoArtifactsError(build.build_num)
    return artifacts[0].url
