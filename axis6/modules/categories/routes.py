from fastapi import APIRouter, Depends
from axis6.database.supabase_client import get_supabase
from axis6.modules.categories.schemas import (
    CategoryCreate, CategoryUpdate, CategoryResponse, CategoryWithStatusResponse
)
from axis6.modules.categories.service import CategoryService
from axis6.modules.profiles.service import ProfileService
from axis6.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/categories", tags=["categories"])


def get_category_service(supabase: Client = Depends(get_supabase)) -> CategoryService:
    return CategoryService(supabase)


@router.get("", response_model=List[CategoryWithStatusResponse])
async def list_categories(
    include_inactive: bool = False,
    user_data: Dict = Depends(get_current_user_id),
    service: CategoryService = Depends(get_category_service),
    supabase: Client = Depends(get_supabase)
):
    """List default and personal categories with today's completion status"""
    today = ProfileService(supabase).today_for(user_data["id"])
    return service.list_with_status(user_data["id"], today, include_inactive=include_inactive)


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    category_data: CategoryCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: CategoryService = Depends(get_category_service)
):
    """Create a personal category"""
    return service.create_category(category_data, user_data["id"])


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: CategoryService = Depends(get_category_service)
):
    """Update a personal category (default axes are read-only)"""
    return service.update_category(category_id, category_data, user_data["id"])


@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: int,
    user_data: Dict = Depends(get_current_user_id),
    service: CategoryService = Depends(get_category_service)
):
    """Delete a personal category without check-ins"""
    service.delete_category(category_id, user_data["id"])
    return None
