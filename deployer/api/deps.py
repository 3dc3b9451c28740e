"""Dependency injection for API endpoints."""

from typing import Annotated

from fastapi import Depends, Request

from deployer.config import Settings
from deployer.core.exceptions import UnauthorizedError, WrongEnvironmentError
from deployer.core.orchestrator import DeployOrchestrator
from deployer.services.pricing import PricePublisher


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return request.app.state.settings


def get_orchestrator(request: Request) -> DeployOrchestrator:
    return request.app.state.orchestrator


def get_price_publisher(request: Request) -> PricePublisher:
    return request.app.state.price_publisher


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
OrchestratorDep = Annotated[DeployOrchestrator, Depends(get_orchestrator)]
PricePublisherDep = Annotated[PricePublisher, Depends(get_price_publisher)]


async def require_cron_caller(request: Request, settings: SettingsDep) -> None:
    """Reject callers other than the App Engine cron scheduler.

    App Engine strips `X-Appengine-Cron` from external requests, so only the
    scheduler can send it.
    """
    if request.headers.get(settings.cron_header_name) != settings.cron_header_value:
        raise UnauthorizedError()


async def require_production(
    _: Annotated[None, Depends(require_cron_caller)],
    settings: SettingsDep,
    orchestrator: OrchestratorDep,
) -> None:
    """Allow the call only from a cron caller inside the production project."""
    project_id = await orchestrator.identity.project_id()
    if project_id != settings.production_project_id:
        raise WrongEnvironmentError(project_id)
