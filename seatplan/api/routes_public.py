"""
Public API routes - no authentication required
"""

from fastapi import APIRouter

from seatplan.schemas.common import HealthResponse
from seatplan.utils.timestamps import format_saved_at, utc_now

router = APIRouter()

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(status="ok", timestamp=format_saved_at(utc_now()))
