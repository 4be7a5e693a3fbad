"""Health check endpoint."""

from fastapi import APIRouter, Depends

from api.deps import get_completion_client, get_page_speed_client
from api.schemas import HealthResponse
from services import CompletionClient, PageSpeedClient

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is running and which optional services are configured.",
)
def health_check(
    page_speed: PageSpeedClient = Depends(get_page_speed_client),
    completion: CompletionClient = Depends(get_completion_client),
) -> HealthResponse:
    """Return service health status."""
    return HealthResponse(
        page_speed_enabled=page_speed.enabled,
        completion_enabled=completion.enabled,
    )
