"""
Category persistence. Categories use their slug as the Firestore document id,
so Firestore itself rejects a second category with the same slug.
"""

import logging
from typing import Any, Dict, List

from kalima.exceptions import ConflictError, NotFoundError, ValidationError
from kalima.models.category import (
    Category,
    category_model_to_firestore,
    firestore_category_to_model,
)
from kalima.services.validation import validate_category_submission

logger = logging.getLogger(__name__)

CATEGORIES = "categories"


class CategoryService:

    def __init__(self, store):
        self.store = store

    async def list_categories(self) -> List[Category]:
        docs = await self.store.list(CATEGORIES)
        categories = [firestore_category_to_model(doc, doc_id) for doc_id, doc in docs]
        return sorted(categories, key=lambda c: c.slug)

    async def get_category(self, slug: str) -> Category:
        doc = await self.store.get(CATEGORIES, slug)
        if doc is None:
            raise NotFoundError("Category not found")
        return firestore_category_to_model(doc, slug)

    async def create_category(self, raw: Dict[str, Any]) -> Category:
        category = Category.model_validate(validate_category_submission(raw))
        try:
            await self.store.create(CATEGORIES, category.slug,
                                    category_model_to_firestore(category))
        except ConflictError:
            raise ConflictError("A category with this slug already exists")
        logger.info(f"Created category '{category.slug}'")
        return category

    async def update_category(self, slug: str, raw: Dict[str, Any]) -> Category:
        """Replace titles and subcategories; the slug itself cannot change"""
        if isinstance(raw, dict):
            body_slug = raw.get("slug")
            if body_slug and body_slug != slug:
                raise ValidationError([{
                    "field": "slug",
                    "message": "Slug cannot be changed after creation",
                }])
            raw = {**raw, "slug": slug}
        category = Category.model_validate(validate_category_submission(raw))

        if await self.store.get(CATEGORIES, slug) is None:
            raise NotFoundError("Category not found")
        await self.store.set(CATEGORIES, slug, category_model_to_firestore(category))
        logger.info(f"Updated category '{slug}'")
        return category

    async def delete_category(self, slug: str) -> None:
        if await self.store.get(CATEGORIES, slug) is None:
            raise NotFoundError("Category not found")
        await self.store.delete(CATEGORIES, slug)
        logger.info(f"Deleted category '{slug}'")
