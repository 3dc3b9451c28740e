"""Production deploy endpoints, triggered by the cron scheduler."""

from fastapi import APIRouter, Depends, Response, status

from deployer.api.deps import OrchestratorDep, require_production
from deployer.models.deployment import SATURN_API, SATURN_UI

router = APIRouter(dependencies=[Depends(require_production)])


@router.get(
    "/deploy-api-prod",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Deploy saturn-api to production",
)
async def deploy_api_prod(orchestrator: OrchestratorDep) -> Response:
    """Deploy the latest dev build of the API, with the production config."""
    await orchestrator.deploy(SATURN_API)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/deploy-ui-prod",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Deploy saturn-ui to production",
)
async def deploy_ui_prod(orchestrator: OrchestratorDep) -> Response:
    await orchestrator.deploy(SATURN_UI)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
