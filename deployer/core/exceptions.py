"""Custom exceptions for the deployer."""

from typing import Any

from fastapi import status


class DeployerError(Exception):
    """Base exception for the deployer.

    `status_code` is the HTTP status the front end answers with when the
    error escapes a request handler.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ProjectNotFoundError(DeployerError):
    """No CircleCI project matches the repository URL."""

    def __init__(self, repo_url: str):
        super().__init__(
            f"Project not found: {repo_url}",
            {"repoUrl": repo_url},
        )


class BuildNotFoundError(DeployerError):
    """No eligible build was found within the search budget."""

    def __init__(self, last_build_num: int | None):
        super().__init__(
            f"Build not found (last build number: {last_build_num})",
            {"lastBuildNumber": last_build_num},
        )
        self.last_build_num = last_build_num


class NoArtifactsError(DeployerError):
    """The build produced no artifacts."""

    def __init__(self, build_num: int):
        super().__init__("No artifacts found", {"buildNumber": build_num})


class UpstreamError(DeployerError):
    """CircleCI rejected the deploy job submission."""

    def __init__(self, status_code: int, body: str):
        super().__init__(
            f"Circle returned status code {status_code}.",
            {"circleResponse": body},
        )
        self.status_code = status_code
        self.body = body


class PollTimeoutError(DeployerError):
    """A poll loop used up its attempt budget."""

    def __init__(self, attempts: int):
        super().__init__(
            f"No terminal result after {attempts} attempts",
            {"attempts": attempts},
        )
        self.attempts = attempts


class DeployTimeoutError(DeployerError):
    """The deploy job did not report an outcome in time."""

    def __init__(self, build_num: int):
        super().__init__(
            "Timeout waiting for build to complete.",
            {"buildNumber": build_num},
        )
        self.build_num = build_num


class UnauthorizedError(DeployerError):
    """Caller is not the cron scheduler."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self):
        super().__init__("unauthorized")


class WrongEnvironmentError(DeployerError):
    """Endpoint called outside the production project."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, project_id: str | None):
        super().__init__("This endpoint available only in prod")
        self.project_id = project_id


class CredentialError(DeployerError):
    """Service account key could not be created."""

    def __init__(self, service_account: str, reason: str):
        super().__init__(
            f"Failed to create key for {service_account}: {reason}",
            {"serviceAccount": service_account},
        )


class PricingError(DeployerError):
    """Billing catalog lookup failed."""

    pass
