"""
Article pipeline and persistence.

    payload -> validate -> normalize fields -> reconcile translations
            -> slug uniqueness check -> Firestore write

Articles are stored under generated document ids; the slug is the public key
and never changes after creation.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from kalima.exceptions import NotFoundError, StoreError, ValidationError
from kalima.models.article import (
    Article,
    article_model_to_firestore,
    firestore_article_to_model,
    utc_now,
)
from kalima.models.category import (
    Category,
    Subcategory,
    category_model_to_firestore,
    firestore_category_to_model,
)
from kalima.services.firestore_store import BatchWrite
from kalima.services.normalizer import normalize_article_fields
from kalima.services.reconciler import backfill_translations, reconcile_translations
from kalima.services.uniqueness import SlugGuard
from kalima.services.validation import format_errors, validate_article_submission
from kalima.utils.slugs import is_valid_slug

logger = logging.getLogger(__name__)

ARTICLES = "articles"
CATEGORIES = "categories"
SLUG_TAKEN = "An article with this slug already exists"
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def normalize_article(raw: Dict[str, Any], now: Optional[float] = None) -> Dict[str, Any]:
    """Validate, default and reconcile a submission; returns the normalized dict"""
    validate_article_submission(raw)
    return reconcile_translations(normalize_article_fields(raw, now))


def _to_model(data: Dict[str, Any]) -> Article:
    try:
        return Article.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(format_errors(e))


def coerce_stored_article(doc: Dict[str, Any], doc_id: str) -> Article:
    """Build an Article from a stored document, upgrading legacy fields"""
    data = backfill_translations(normalize_article_fields(doc))
    return firestore_article_to_model(data, doc_id)


def _humanize(slug: str) -> str:
    return slug.replace("-", " ").strip().title()


def _search_text(article: Article, language: Optional[str]) -> str:
    parts = []
    for lang, translation in article.translations.items():
        if language and lang != language:
            continue
        parts += [translation.title, translation.summary]
        parts += translation.keywords
        for section in translation.content:
            parts += [section.title, section.paragraph]
    return " ".join(parts).lower()


def _matches(
    article: Article,
    category: Optional[str],
    subcategory: Optional[str],
    language: Optional[str],
    featured: Optional[bool],
    popular: Optional[bool],
    query: Optional[str],
    include_drafts: bool,
) -> bool:
    if article.draft and not include_drafts:
        return False
    if language and language not in article.available_languages:
        return False
    if category and article.category != category:
        return False
    if subcategory and article.subcategory != subcategory:
        return False
    if featured is not None and article.featured != featured:
        return False
    if popular is not None and article.popular != popular:
        return False
    if query and query.strip().lower() not in _search_text(article, language):
        return False
    return True


class ArticleService:
    """Create, read, update and delete articles"""

    def __init__(self, store, guard: Optional[SlugGuard] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.guard = guard or SlugGuard(store)
        self.clock = clock

    def prepare(self, raw: Dict[str, Any], now: Optional[datetime] = None) -> Article:
        """Run the submission through validation, normalization and reconciliation"""
        timestamp = now.timestamp() if now is not None else None
        return _to_model(normalize_article(raw, timestamp))

    # ============================================
    # READS
    # ============================================

    async def _find(self, slug: str):
        return await self.store.find_one(ARTICLES, "slug", slug)

    async def get_article(self, slug: str) -> Article:
        found = await self._find(slug)
        if found is None:
            raise NotFoundError("Article not found")
        doc_id, doc = found

        try:
            return coerce_stored_article(doc, doc_id)
        except PydanticValidationError as e:
            logger.error(f"Stored article {doc_id} is malformed: {e}")
            raise StoreError(f"Stored article {doc_id} is malformed")

    async def list_articles(
        self,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        language: Optional[str] = None,
        featured: Optional[bool] = None,
        popular: Optional[bool] = None,
        query: Optional[str] = None,
        include_drafts: bool = False,
    ) -> List[Article]:
        """Fetch the whole collection and filter it in memory, newest first"""
        docs = await self.store.list(ARTICLES)

        articles = []
        for doc_id, doc in docs:
            try:
                article = coerce_stored_article(doc, doc_id)
            except PydanticValidationError as e:
                logger.warning(f"Skipping malformed article {doc_id}: {e}")
                continue
            if _matches(article, category, subcategory, language,
                        featured, popular, query, include_drafts):
                articles.append(article)

        articles.sort(key=lambda a: a.created_at or _OLDEST, reverse=True)
        return articles

    # ============================================
    # WRITES
    # ============================================

    async def _category_write(self, article: Article) -> Optional[BatchWrite]:
        """Batch write that makes the article's category and subcategory exist, if needed"""
        doc = await self.store.get(CATEGORIES, article.category)
        subcategory = Subcategory(
            slug=article.subcategory, titles={"en": _humanize(article.subcategory)})

        if doc is None:
            category = Category(
                slug=article.category,
                titles={"en": _humanize(article.category)},
                subcategories=[subcategory],
            )
            return BatchWrite("create", CATEGORIES, category.slug,
                              category_model_to_firestore(category))

        category = firestore_category_to_model(doc, article.category)
        if category.find_subcategory(article.subcategory) is not None:
            return None
        # appended server-side so concurrent edits to the category are kept
        return BatchWrite("union", CATEGORIES, category.slug,
                          {"subcategories": [subcategory.model_dump()]})

    async def create_article(self, raw: Dict[str, Any], create_category: bool = False) -> Article:
        """
        Create a new article.

        Args:
            raw: article payload
            create_category: also create the article's category/subcategory
                when missing, in the same atomic batch as the article

        Raises:
            ValidationError, InvariantError: payload rejected, nothing written
            ConflictError: the slug is already taken
        """
        now = self.clock()
        article = self.prepare(raw, now)
        if create_category and not (
                is_valid_slug(article.category) and is_valid_slug(article.subcategory)):
            raise ValidationError([{
                "field": "category",
                "message": "Category and subcategory must be valid slugs to be created",
            }])
        article.created_at = now
        article.updated_at = now

        async with self.guard.reserve(ARTICLES, article.slug, SLUG_TAKEN):
            data = article_model_to_firestore(article)
            category_write = await self._category_write(article) if create_category else None
            if category_write is not None:
                ids = await self.store.commit_batch(
                    [category_write, BatchWrite("set", ARTICLES, None, data)])
                article.id = ids[-1]
                logger.info(f"Created category '{article.category}' with article '{article.slug}'")
            else:
                article.id = await self.store.add(ARTICLES, data)

        logger.info(f"Created article '{article.slug}' ({article.id})")
        return article

    async def update_article(self, slug: str, raw: Dict[str, Any]) -> Article:
        """Replace an article; ``createdAt`` is kept from the stored document"""
        body_slug = raw.get("slug") if isinstance(raw, dict) else None
        if isinstance(body_slug, str) and body_slug.strip() and body_slug != slug:
            raise ValidationError([{
                "field": "slug",
                "message": "Slug cannot be changed after creation",
            }])

        payload = {**raw, "slug": slug} if isinstance(raw, dict) else raw
        article = self.prepare(payload)

        found = await self._find(slug)
        if found is None:
            raise NotFoundError("Article not found")
        doc_id, existing = found

        return await self._replace(doc_id, article, existing.get("createdAt"))

    async def set_draft(self, slug: str, draft: bool) -> Article:
        """Move an article between the Draft and Published states"""
        found = await self._find(slug)
        if found is None:
            raise NotFoundError("Article not found")
        doc_id, existing = found

        article = coerce_stored_article(existing, doc_id)
        article.draft = draft
        return await self._replace(doc_id, article, existing.get("createdAt"))

    async def _replace(self, doc_id: str, article: Article, created_at) -> Article:
        now = self.clock()
        article.created_at = created_at or now
        article.updated_at = now
        await self.store.set(ARTICLES, doc_id, article_model_to_firestore(article))
        article.id = doc_id
        logger.info(f"Updated article '{article.slug}' ({doc_id})")
        return article

    async def delete_article(self, slug: str) -> None:
        found = await self._find(slug)
        if found is None:
            raise NotFoundError("Article not found")
        await self.store.delete(ARTICLES, found[0])
        logger.info(f"Deleted article '{slug}' ({found[0]})")
