"""Data models for the deployer."""

from deployer.models.build import Artifact, Build, CircleProject
from deployer.models.deployment import (
    SATURN_API,
    SATURN_UI,
    DeployRequest,
    DeployResult,
    DeployTarget,
    ServiceAccountKey,
)

__all__ = [
    "Artifact",
    "Build",
    "CircleProject",
    "DeployRequest",
    "DeployResult",
    "DeployTarget",
    "SATURN_API",
    "SATURN_UI",
    "ServiceAccountKey",
]
