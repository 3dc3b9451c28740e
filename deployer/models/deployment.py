"""Deployment data models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DeployTarget(BaseModel):
    """A project that can be pushed to production."""

    model_config = ConfigDict(frozen=True)

    repo_name: str
    include_config: bool = False


SATURN_API = DeployTarget(repo_name="saturn-api", include_config=True)
SATURN_UI = DeployTarget(repo_name="saturn-ui", include_config=False)


class ServiceAccountKey(BaseModel):
    """Short-lived key for a service account."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Resource name, used to revoke the key")
    key_json: str = Field(..., repr=False)


class DeployRequest(BaseModel):
    """Parameters handed to the CircleCI deploy job."""

    artifact_url: str
    config_json: str | None = None
    sa_key_json: str = Field(..., repr=False)

    def to_build_parameters(self, job_name: str) -> dict[str, Any]:
        """Render the CircleCI job submission body."""
        parameters: dict[str, Any] = {
            "CIRCLE_JOB": job_name,
            "ARTIFACT_URL": self.artifact_url,
            "SA_KEY_JSON": self.sa_key_json,
        }
        if self.config_json is not None:
            parameters["CONFIG_JSON"] = self.config_json
        return {"build_parameters": parameters}


class DeployResult(BaseModel):
    """Result of a finished deploy job."""

    repo_name: str
    source_build_num: int
    deploy_build_num: int
    outcome: str
    artifact_url: str
