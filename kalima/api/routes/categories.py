"""Categories API routes"""

from fastapi import APIRouter, Body, Depends, status
from typing import Any, Dict, List

from kalima.dependencies import get_category_service
from kalima.models.category import Category
from kalima.services.category_service import CategoryService

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get("", response_model=List[Category])
async def list_categories(service: CategoryService = Depends(get_category_service)):
    return await service.list_categories()


@router.get("/{slug}", response_model=Category)
async def get_category(slug: str, service: CategoryService = Depends(get_category_service)):
    return await service.get_category(slug)


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: Dict[str, Any] = Body(...),
    service: CategoryService = Depends(get_category_service),
):
    return await service.create_category(payload)


@router.put("/{slug}", response_model=Category)
async def update_category(
    slug: str,
    payload: Dict[str, Any] = Body(...),
    service: CategoryService = Depends(get_category_service),
):
    return await service.update_category(slug, payload)


@router.delete("/{slug}")
async def delete_category(slug: str, service: CategoryService = Depends(get_category_service)):
    await service.delete_category(slug)
    return {"message": "Category deleted successfully"}
