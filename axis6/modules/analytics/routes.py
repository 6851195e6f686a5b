from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from axis6.database.supabase_client import get_supabase
from axis6.modules.analytics.schemas import AnalyticsResponse, ExportRequest
from axis6.modules.analytics.service import AnalyticsService
from axis6.modules.analytics.exporter import CSV_FILENAME
from axis6.modules.profiles.service import ProfileService
from axis6.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/analytics", tags=["analytics"])


def get_analytics_service(supabase: Client = Depends(get_supabase)) -> AnalyticsService:
    return AnalyticsService(supabase)


@router.get("", response_model=AnalyticsResponse)
async def get_analytics(
    period: int = Query(30),
    category_id: Optional[int] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
    supabase: Client = Depends(get_supabase)
):
    today = ProfileService(supabase).today_for(user_data["id"])
    return service.get_analytics(user_data["id"], today, period=period, category_id=category_id)


@router.post("/export")
async def export_data(
    export_request: ExportRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """Download the caller's check-in history as JSON or CSV"""
    if export_request.format == "csv":
        content = service.export_csv(user_data["id"])
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'}
        )
    return service.export_json(user_data["id"], include_profile=export_request.include_profile)
