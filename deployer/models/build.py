"""CircleCI data models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Build(BaseModel):
    """One execution record of a CircleCI job."""

    model_config = ConfigDict(frozen=True)

    build_num: int
    job_name: str | None = None
    outcome: str | None = None
    previous_successful_build_num: int | None = None

    @property
    def has_outcome(self) -> bool:
        return bool(self.outcome)

    @classmethod
    def from_circle(cls, payload: dict[str, Any]) -> "Build":
        """Build from a `/project/<vcs>/<org>/<repo>/<num>` response."""
        workflows = payload.get("workflows") or {}
        previous = payload.get("previous_successful_build") or {}
        return cls(
            build_num=payload["build_num"],
            job_name=workflows.get("job_name"),
            outcome=payload.get("outcome"),
            previous_successful_build_num=previous.get("build_num"),
        )


class Artifact(BaseModel):
    """A file produced by a build."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    url: str


class CircleProject(BaseModel):
    """Entry of the `/projects` listing."""

    model_config = ConfigDict(frozen=True)

    reponame: str
    vcs_url: str
    last_success_by_branch: dict[str, int] = Field(default_factory=dict)

    def last_success(self, branch: str) -> int | None:
        return self.last_success_by_branch.get(branch)

    @classmethod
    def from_circle(cls, payload: dict[str, Any]) -> "CircleProject":
        last_success: dict[str, int] = {}
        for branch, info in (payload.get("branches") or {}).items():
            build = (info or {}).get("last_success") or {}
            if build.get("build_num") is not None:
                last_success[branch] = build["build_num"]
        return cls(
            reponame=payload["reponame"],
            vcs_url=payload["vcs_url"],
            last_success_by_branch=last_success,
        )
