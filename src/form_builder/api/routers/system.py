"""System endpoints: health check."""

from fastapi import APIRouter

from form_builder.api.dependencies import get_settings

router = APIRouter(tags=["system"])


@router.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "data_dir": str(get_settings().data_dir)}
