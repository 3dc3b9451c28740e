"""Cloud pricing endpoints."""

from fastapi import APIRouter, Depends, Response, status

from deployer.api.deps import PricePublisherDep, require_production

router = APIRouter(dependencies=[Depends(require_production)])


@router.get(
    "/update-download-prices",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Refresh the published download price",
)
async def update_download_prices(publisher: PricePublisherDep) -> Response:
    await publisher.publish()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
