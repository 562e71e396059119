"""Static pages API routes"""

from fastapi import APIRouter, Body, Depends, status
from typing import Any, Dict, List

from kalima.dependencies import get_static_page_service
from kalima.models.static_page import StaticPage
from kalima.services.static_page_service import StaticPageService

router = APIRouter(prefix="/api/static-pages", tags=["Static Pages"])


@router.get("", response_model=List[StaticPage])
async def list_pages(service: StaticPageService = Depends(get_static_page_service)):
    return await service.list_pages()


@router.get("/{slug}", response_model=StaticPage)
async def get_page(slug: str, service: StaticPageService = Depends(get_static_page_service)):
    return await service.get_page(slug)


@router.post("", response_model=StaticPage, status_code=status.HTTP_201_CREATED)
async def create_page(
    payload: Dict[str, Any] = Body(...),
    service: StaticPageService = Depends(get_static_page_service),
):
    return await service.create_page(payload)


@router.put("/{slug}", response_model=StaticPage)
async def update_page(
    slug: str,
    payload: Dict[str, Any] = Body(...),
    service: StaticPageService = Depends(get_static_page_service),
):
    return await service.update_page(slug, payload)


@router.delete("/{slug}")
async def delete_page(slug: str, service: StaticPageService = Depends(get_static_page_service)):
    await service.delete_page(slug)
    return {"message": "Page deleted successfully"}
