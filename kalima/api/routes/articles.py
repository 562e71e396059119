"""Articles API routes"""

from fastapi import APIRouter, Body, Depends, Query, status
from typing import Any, Dict, List, Optional

from kalima.dependencies import get_article_service
from kalima.models.article import Article
from kalima.schemas.article import DraftUpdate
from kalima.services.article_service import ArticleService


router = APIRouter(prefix="/api/articles", tags=["Articles"])


@router.get("", response_model=List[Article])
async def list_articles(
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    language: Optional[str] = None,
    q: Optional[str] = Query(None, description="Search titles, summaries, keywords and sections"),
    featured: Optional[bool] = None,
    popular: Optional[bool] = None,
    includeDrafts: bool = False,
    service: ArticleService = Depends(get_article_service),
):
    """List published articles (newest first), optionally filtered"""
    return await service.list_articles(
        category=category,
        subcategory=subcategory,
        language=language,
        featured=featured,
        popular=popular,
        query=q,
        include_drafts=includeDrafts,
    )


@router.get("/{slug}", response_model=Article)
async def get_article(slug: str, service: ArticleService = Depends(get_article_service)):
    return await service.get_article(slug)


@router.post("", response_model=Article, status_code=status.HTTP_201_CREATED)
async def create_article(
    payload: Dict[str, Any] = Body(...),
    createCategory: bool = False,
    service: ArticleService = Depends(get_article_service),
):
    """
    Create an article

    - **slug**: optional, derived from the title when omitted
    - **availableLanguages** / **translations**: must match one to one
    - **createCategory**: also create a missing category/subcategory
    """
    return await service.create_article(payload, create_category=createCategory)


@router.put("/{slug}", response_model=Article)
async def update_article(
    slug: str,
    payload: Dict[str, Any] = Body(...),
    service: ArticleService = Depends(get_article_service),
):
    """Replace an article. The slug cannot be changed."""
    return await service.update_article(slug, payload)


@router.patch("/{slug}/draft", response_model=Article)
async def set_draft(
    slug: str,
    payload: DraftUpdate,
    service: ArticleService = Depends(get_article_service),
):
    """Publish (draft=false) or unpublish (draft=true) an article"""
    return await service.set_draft(slug, payload.draft)


@router.delete("/{slug}")
async def delete_article(slug: str, service: ArticleService = Depends(get_article_service)):
    await service.delete_article(slug)
    return {"message": "Article deleted successfully"}
