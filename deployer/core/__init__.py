"""Core functionality for the deployer."""

from deployer.core.exceptions import (
    BuildNotFoundError,
    CredentialError,
    DeployerError,
    DeployTimeoutError,
    NoArtifactsError,
    PollTimeoutError,
    PricingError,
    ProjectNotFoundError,
    UnauthorizedError,
    UpstreamError,
    WrongEnvironmentError,
)
from deployer.core.polling import poll_until

__all__ = [
    "BuildNotFoundError",
    "CredentialError",
    "DeployerError",
    "DeployTimeoutError",
    "NoArtifactsError",
    "PollTimeoutError",
    "PricingError",
    "ProjectNotFoundError",
    "UnauthorizedError",
    "UpstreamError",
    "WrongEnvironmentError",
    "poll_until",
]
