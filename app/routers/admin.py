# =============================================================================
# app/routers/admin.py - Admin Dashboard Endpoints
# =============================================================================
# Server-side counterpart of the /admin-dashboard route guard: every
# endpoint here requires the caller's profile role to be admin.
# =============================================================================

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.auth import AuthUser, require_admin
from app.dependencies import SupabaseDep
from app.exceptions import UpstreamError
from lib.supabase_client import MARKETPLACE_TABLES, SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter()


class OverviewResponse(BaseModel):
    """Row counts per marketplace table."""
    counts: dict[str, int]


@router.get("/overview", response_model=OverviewResponse)
async def admin_overview(
    supabase: SupabaseDep,
    user: AuthUser = Depends(require_admin),
) -> OverviewResponse:
    """
    Row counts for the admin dashboard.

    Raises:
        401: If not authenticated
        403: If the caller is not an admin
        502: If a count query fails
    """
    counts = {}
    for table in MARKETPLACE_TABLES:
        try:
            counts[table] = supabase.count_rows(table)
        except SupabaseClientError as e:
            raise UpstreamError(table, e.message)

    logger.info(f"Admin overview requested by {user.id}")
    return OverviewResponse(counts=counts)
