"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request

from recipe_catalog.api.dependencies import SettingsDep  # noqa: TC001
from recipe_catalog.schemas import HealthResponse


router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description=(
        "Reports the data file state (ok, empty, unreadable) and whether the "
        "import model is configured. The service stays healthy without a model."
    ),
)
async def health_check(request: Request, settings: SettingsDep) -> HealthResponse:
    """Check that the service is alive and report component status."""
    checks: dict[str, str] = {}

    store = getattr(request.app.state, "recipe_store", None)
    checks["storage"] = await store.status() if store is not None else "not_initialized"

    import_service = getattr(request.app.state, "import_service", None)
    if not settings.llm.enabled:
        checks["llm"] = "disabled"
    elif import_service is None:
        checks["llm"] = "not_initialized"
    else:
        checks["llm"] = "configured" if import_service.llm_ready else "missing_api_key"

    status = "healthy" if checks["storage"] in ("ok", "empty") else "degraded"
    return HealthResponse(
        status=status,
        version=settings.app.version,
        environment=settings.APP_ENV,
        checks=checks,
    )
