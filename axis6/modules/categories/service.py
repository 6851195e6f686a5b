from supabase import Client
from axis6.config.categories_config import (
    CUSTOM_CATEGORY_COLOR, CUSTOM_CATEGORY_ICON, CUSTOM_CATEGORY_POSITION
)
from axis6.modules.categories.schemas import (
    CategoryCreate, CategoryUpdate, CategoryResponse, CategoryWithStatusResponse
)
from typing import Dict, List
from fastapi import HTTPException
from datetime import date, datetime, timezone
import logging
import re

logger = logging.getLogger(__name__)

CATEGORIES_TABLE = "axis6_categories"
CHECKINS_TABLE = "axis6_checkins"


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower())
    return slug.strip("-")


def is_visible_to(category: dict, user_id: str) -> bool:
    """Default categories are shared; personal ones belong to their creator."""
    return category.get("created_by") in (None, user_id)


class CategoryService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _fetch_visible(self, user_id: str, include_inactive: bool = False) -> List[dict]:
        query = self.supabase.table(CATEGORIES_TABLE)\
            .select("*")\
            .or_(f"created_by.is.null,created_by.eq.{user_id}")
        if not include_inactive:
            query = query.eq("is_active", True)
        result = query.order("position").execute()
        return sorted(result.data or [], key=lambda c: (c.get("position", 0), c.get("id", 0)))

    def list_categories(self, user_id: str, include_inactive: bool = False) -> List[CategoryResponse]:
        try:
            return [CategoryResponse(**c) for c in self._fetch_visible(user_id, include_inactive)]
        except Exception as e:
            logger.error(f"Error listing categories: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def list_with_status(self, user_id: str, today: date, include_inactive: bool = False) -> List[CategoryWithStatusResponse]:
        """Categories annotated with the user's check-in for today"""
        try:
            categories = self._fetch_visible(user_id, include_inactive)
            checkins_result = self.supabase.table(CHECKINS_TABLE)\
                .select("id, category_id, mood, notes, completed_at")\
                .eq("user_id", user_id)\
                .eq("completed_at", today.isoformat())\
                .execute()
            checkin_map = {c["category_id"]: c for c in (checkins_result.data or [])}
            return [
                CategoryWithStatusResponse(
                    **category,
                    completed=category["id"] in checkin_map,
                    today_checkin=checkin_map.get(category["id"])
                )
                for category in categories
            ]
        except Exception as e:
            logger.error(f"Error listing categories with status: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_category_map(self, user_id: str, include_inactive: bool = True) -> Dict[int, dict]:
        """Map of category id -> row for every category the user can see"""
        try:
            return {c["id"]: c for c in self._fetch_visible(user_id, include_inactive)}
        except Exception as e:
            logger.error(f"Error building category map: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def count_active(self, user_id: str) -> int:
        return len(self._fetch_visible(user_id, include_inactive=False))

    def get_visible_category(self, category_id: int, user_id: str) -> dict:
        """Category row the user may check in against; 404 otherwise"""
        try:
            result = self.supabase.table(CATEGORIES_TABLE)\
                .select("*")\
                .eq("id", category_id)\
                .limit(1)\
                .execute()
            if not result.data or not is_visible_to(result.data[0], user_id):
                raise HTTPException(status_code=404, detail="Category not found")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _get_owned_category(self, category_id: int, user_id: str) -> dict:
        category = self.get_visible_category(category_id, user_id)
        if category.get("created_by") != user_id:
            raise HTTPException(status_code=403, detail="Only personal categories can be modified")
        return category

    def create_category(self, category_data: CategoryCreate, user_id: str) -> CategoryResponse:
        """Create a personal category"""
        try:
            base_slug = slugify(category_data.name["en"])
            if not base_slug:
                raise HTTPException(status_code=400, detail="Category name must contain letters or digits")
            slug = f"{base_slug}-{user_id[:8]}"

            existing = self.supabase.table(CATEGORIES_TABLE)\
                .select("id")\
                .eq("slug", slug)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=400, detail="You already have a category with this name")

            result = self.supabase.table(CATEGORIES_TABLE).insert({
                "slug": slug,
                "name": category_data.name,
                "description": category_data.description,
                "color": category_data.color or CUSTOM_CATEGORY_COLOR,
                "icon": category_data.icon or CUSTOM_CATEGORY_ICON,
                "position": CUSTOM_CATEGORY_POSITION,
                "is_active": True,
                "is_default": False,
                "created_by": user_id
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create category")

            logger.info(f"User {user_id} created category {slug}")
            return CategoryResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating category: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_category(self, category_id: int, category_data: CategoryUpdate, user_id: str) -> CategoryResponse:
        """Update a personal category owned by the user"""
        try:
            self._get_owned_category(category_id, user_id)

            update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
            if category_data.name is not None:
                update_data["name"] = category_data.name
            if category_data.description is not None:
                update_data["description"] = category_data.description
            if category_data.color is not None:
                update_data["color"] = category_data.color
            if category_data.icon is not None:
                update_data["icon"] = category_data.icon
            if category_data.is_active is not None:
                update_data["is_active"] = category_data.is_active

            result = self.supabase.table(CATEGORIES_TABLE)\
                .update(update_data)\
                .eq("id", category_id)\
                .eq("created_by", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Category not found")

            return CategoryResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_category(self, category_id: int, user_id: str) -> bool:
        """Delete a personal category that has no check-ins"""
        try:
            self._get_owned_category(category_id, user_id)

            checkins = self.supabase.table(CHECKINS_TABLE)\
                .select("id")\
                .eq("category_id", category_id)\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
            if checkins.data:
                raise HTTPException(
                    status_code=400,
                    detail="Cannot delete category with existing check-ins. Consider deactivating instead."
                )

            result = self.supabase.table(CATEGORIES_TABLE)\
                .delete()\
                .eq("id", category_id)\
                .eq("created_by", user_id)\
                .execute()

            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

