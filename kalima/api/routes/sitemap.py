"""Sitemap route"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from kalima.config import settings
from kalima.dependencies import (
    get_article_service,
    get_category_service,
    get_static_page_service,
)
from kalima.services.sitemap_service import collect_urls, render_sitemap

router = APIRouter(tags=["Sitemap"])


@router.get("/sitemap.xml")
async def sitemap(
    articles=Depends(get_article_service),
    categories=Depends(get_category_service),
    pages=Depends(get_static_page_service),
):
    base_url = settings.SITE_URL.rstrip("/")
    urls = await collect_urls(base_url, articles, categories, pages)
    return Response(content=render_sitemap(urls), media_type="application/xml")
