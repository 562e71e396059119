"""
Static pages (about, privacy, contact ...), keyed by an immutable slug
"""

import copy
import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from kalima.exceptions import NotFoundError, ValidationError
from kalima.models.article import utc_now
from kalima.models.static_page import (
    StaticPage,
    firestore_page_to_model,
    page_model_to_firestore,
)
from kalima.services.uniqueness import SlugGuard
from kalima.services.validation import validate_static_page_submission
from kalima.utils.slugs import slugify

logger = logging.getLogger(__name__)

STATIC_PAGES = "staticPages"
SLUG_TAKEN = "A page with this slug already exists"


def normalize_page(raw: Dict[str, Any], now: Optional[float] = None) -> Dict[str, Any]:
    """Fill in the slug (from the English or first title) and keyword lists.

    ``now`` is the unix time used when no title gives a usable slug.
    """
    page = copy.deepcopy(raw)
    translations = page.get("translations") or {}

    if not (page.get("slug") or "").strip():
        titles = [translations["en"]["title"]] if "en" in translations else []
        titles += [t["title"] for t in translations.values()]
        page["slug"] = next(
            (s for s in (slugify(t) for t in titles) if s),
            f"page-{int(now if now is not None else time.time())}",
        )

    for translation in translations.values():
        if not isinstance(translation.get("keywords"), list):
            translation["keywords"] = []
    return page


class StaticPageService:

    def __init__(self, store, guard: Optional[SlugGuard] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.guard = guard or SlugGuard(store)
        self.clock = clock

    def prepare(self, raw: Dict[str, Any], now: Optional[datetime] = None) -> StaticPage:
        validate_static_page_submission(raw)
        timestamp = now.timestamp() if now is not None else None
        return StaticPage.model_validate(normalize_page(raw, timestamp))

    async def list_pages(self) -> List[StaticPage]:
        docs = await self.store.list(STATIC_PAGES)
        pages = [firestore_page_to_model(doc, doc_id) for doc_id, doc in docs]
        return sorted(pages, key=lambda p: p.slug)

    async def get_page(self, slug: str) -> StaticPage:
        found = await self.store.find_one(STATIC_PAGES, "slug", slug)
        if found is None:
            raise NotFoundError("Page not found")
        return firestore_page_to_model(found[1], found[0])

    async def create_page(self, raw: Dict[str, Any]) -> StaticPage:
        now = self.clock()
        page = self.prepare(raw, now)
        page.created_at = now
        page.updated_at = now

        async with self.guard.reserve(STATIC_PAGES, page.slug, SLUG_TAKEN):
            page.id = await self.store.add(STATIC_PAGES, page_model_to_firestore(page))
        logger.info(f"Created page '{page.slug}' ({page.id})")
        return page

    async def update_page(self, slug: str, raw: Dict[str, Any]) -> StaticPage:
        if isinstance(raw, dict):
            body_slug = raw.get("slug")
            if isinstance(body_slug, str) and body_slug.strip() and body_slug != slug:
                raise ValidationError([{
                    "field": "slug",
                    "message": "Slug cannot be changed after creation",
                }])
            raw = {**raw, "slug": slug}
        page = self.prepare(raw)

        found = await self.store.find_one(STATIC_PAGES, "slug", slug)
        if found is None:
            raise NotFoundError("Page not found")
        doc_id, existing = found

        page.created_at = existing.get("createdAt")
        page.updated_at = self.clock()
        await self.store.set(STATIC_PAGES, doc_id, page_model_to_firestore(page))
        page.id = doc_id
        logger.info(f"Updated page '{slug}' ({doc_id})")
        return page

    async def delete_page(self, slug: str) -> None:
        found = await self.store.find_one(STATIC_PAGES, "slug", slug)
        if found is None:
            raise NotFoundError("Page not found")
        await self.store.delete(STATIC_PAGES, found[0])
        logger.info(f"Deleted page '{slug}' ({found[0]})")
