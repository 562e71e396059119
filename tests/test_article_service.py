import asyncio
from unittest.mock import AsyncMock

import pytest

from kalima.exceptions import (
    ConflictError, InvariantError, NotFoundError, StoreError, ValidationError,
)
from kalima.services.article_service import ArticleService, coerce_stored_article


@pytest.fixture
def service(store, clock):
    return ArticleService(store, clock=clock)


@pytest.mark.asyncio
async def test_create_article_writes_normalized_document(service, store, article_payload):
    article = await service.create_article(article_payload())

    assert article.id in store.docs("articles")
    stored = store.docs("articles")[article.id]
    assert stored["slug"] == "hi"
    assert stored["category"] == "general"
    assert stored["translations"]["en"]["content"] == [
        {"title": "Section", "paragraph": "text", "references": []}]
    assert stored["createdAt"] == stored["updatedAt"]
    assert "id" not in stored


@pytest.mark.asyncio
async def test_duplicate_slug_is_a_conflict(service, store, article_payload):
    await service.create_article(article_payload(slug="my-article"))

    with pytest.raises(ConflictError):
        await service.create_article(article_payload(title="Other", slug="my-article"))

    assert len(store.docs("articles")) == 1


@pytest.mark.asyncio
async def test_concurrent_creates_with_same_slug(service, store, article_payload):
    results = await asyncio.gather(
        service.create_article(article_payload(slug="my-article")),
        service.create_article(article_payload(slug="my-article")),
        return_exceptions=True,
    )

    conflicts = [r for r in results if isinstance(r, ConflictError)]
    assert len(conflicts) == 1
    assert len(store.docs("articles")) == 1


@pytest.mark.asyncio
async def test_rejected_payload_writes_nothing(service, store, article_payload):
    payload = article_payload(availableLanguages=["en", "fr"])

    with pytest.raises(InvariantError):
        await service.create_article(payload)
    with pytest.raises(ValidationError):
        await service.create_article({"translations": {}})

    assert store.docs("articles") == {}


@pytest.mark.asyncio
async def test_update_unknown_article_is_not_found(service, store, article_payload):
    with pytest.raises(NotFoundError):
        await service.update_article("does-not-exist", article_payload())

    assert store.docs("articles") == {}


@pytest.mark.asyncio
async def test_update_keeps_created_at(service, store, article_payload):
    created = await service.create_article(article_payload())

    updated = await service.update_article("hi", article_payload(featured=True))

    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at
    assert store.docs("articles")[created.id]["featured"] is True


@pytest.mark.asyncio
async def test_slug_cannot_change(service, article_payload):
    await service.create_article(article_payload())

    with pytest.raises(ValidationError) as exc_info:
        await service.update_article("hi", article_payload(slug="hello"))

    assert exc_info.value.errors[0]["field"] == "slug"


@pytest.mark.asyncio
async def test_update_removing_language_with_translation_fails(service, store):
    payload = {
        "availableLanguages": ["en", "fr"],
        "translations": {
            "en": {"title": "Hello", "summary": "S", "content": ["Hello"]},
            "fr": {"title": "Bonjour", "summary": "S", "content": ["Bonjour"]},
        },
    }
    created = await service.create_article(payload)

    with pytest.raises(InvariantError):
        await service.update_article("hello", {**payload, "availableLanguages": ["en"]})

    assert store.docs("articles")[created.id]["availableLanguages"] == ["en", "fr"]


@pytest.mark.asyncio
async def test_set_draft_publishes_article(service, store, article_payload):
    created = await service.create_article(article_payload())
    assert created.draft is True

    published = await service.set_draft("hi", False)

    assert published.draft is False
    assert store.docs("articles")[created.id]["draft"] is False
    assert [a.slug for a in await service.list_articles()] == ["hi"]


@pytest.mark.asyncio
async def test_get_article_returns_created_record(service, article_payload):
    created = await service.create_article(article_payload(
        imageUrls=["https://e.com/1.jpg", "https://e.com/2.jpg"],
        imageDescriptions=["First"],
    ))

    fetched = await service.get_article("hi")

    assert fetched.model_dump() == created.model_dump()


@pytest.mark.asyncio
async def test_get_article_looks_up_slug_only():
    store = AsyncMock()
    store.find_one.return_value = None
    store.get.side_effect = StoreError("invalid document id")

    with pytest.raises(NotFoundError):
        await ArticleService(store).get_article("__x__")

    store.find_one.assert_called_once_with("articles", "slug", "__x__")
    store.get.assert_not_called()


@pytest.mark.asyncio
async def test_get_article_by_slug(service, article_payload):
    created = await service.create_article(article_payload())

    assert (await service.get_article("hi")).id == created.id
    with pytest.raises(NotFoundError):
        await service.get_article(created.id)
    with pytest.raises(NotFoundError):
        await service.get_article("missing")


@pytest.mark.asyncio
async def test_delete_article(service, store, article_payload):
    await service.create_article(article_payload())

    await service.delete_article("hi")

    assert store.docs("articles") == {}
    with pytest.raises(NotFoundError):
        await service.delete_article("hi")


@pytest.mark.asyncio
async def test_create_with_new_category(service, store, article_payload):
    await service.create_article(
        article_payload(category="language-learning", subcategory="vocabulary"),
        create_category=True,
    )

    category = store.docs("categories")["language-learning"]
    assert category["titles"] == {"en": "Language Learning"}
    assert category["subcategories"] == [
        {"slug": "vocabulary", "titles": {"en": "Vocabulary"}}]


@pytest.mark.asyncio
async def test_create_adds_missing_subcategory(service, store, article_payload):
    store.docs("categories")["education"] = {
        "slug": "education",
        "titles": {"en": "Education"},
        "subcategories": [{"slug": "online", "titles": {"en": "Online"}}],
    }

    await service.create_article(
        article_payload(category="education", subcategory="exams"), create_category=True)
    await service.create_article(
        article_payload(title="Second", category="education", subcategory="exams"),
        create_category=True,
    )

    slugs = [s["slug"] for s in store.docs("categories")["education"]["subcategories"]]
    assert slugs == ["online", "exams"]
    assert len(store.docs("articles")) == 2


@pytest.mark.asyncio
async def test_category_left_alone_without_flag(service, store, article_payload):
    await service.create_article(article_payload(category="travel"))

    assert store.docs("categories") == {}


@pytest.mark.asyncio
async def test_invalid_category_slug_with_flag(service, store, article_payload):
    with pytest.raises(ValidationError):
        await service.create_article(article_payload(category="Travel Tips"), create_category=True)

    assert store.docs("articles") == {}
    assert store.docs("categories") == {}


@pytest.mark.asyncio
async def test_list_articles_filters(service, article_payload):
    await service.create_article(article_payload(
        title="Travel words", category="language", subcategory="vocabulary", draft=False))
    await service.create_article(article_payload(
        title="Grammar basics", category="language", subcategory="grammar",
        featured=True, draft=False))
    await service.create_article(article_payload(title="Unpublished", draft=True))

    listed = await service.list_articles()
    assert [a.slug for a in listed] == ["grammar-basics", "travel-words"]

    assert [a.slug for a in await service.list_articles(subcategory="vocabulary")] == [
        "travel-words"]
    assert [a.slug for a in await service.list_articles(featured=True)] == [
        "grammar-basics"]
    assert [a.slug for a in await service.list_articles(query="TRAVEL")] == [
        "travel-words"]
    assert await service.list_articles(language="fr") == []
    assert len(await service.list_articles(include_drafts=True)) == 3


@pytest.mark.asyncio
async def test_list_skips_malformed_documents(service, store, article_payload):
    await service.create_article(article_payload(draft=False))
    store.docs("articles")["broken"] = {"slug": "broken", "translations": "nope"}

    assert [a.slug for a in await service.list_articles()] == ["hi"]


def test_legacy_document_is_coerced():
    doc = {
        "slug": "old-article",
        "author": "Jane",
        "imageUrl": "https://example.com/old.jpg",
        "availableLanguages": ["en"],
        "translations": {
            "en": {"title": "Old article", "summary": "S", "content": ["Plain text"]},
        },
        "draft": False,
    }

    article = coerce_stored_article(doc, "abc")

    assert article.id == "abc"
    assert article.title == "Old article"
    assert article.author.display_name == "Jane"
    assert article.image_urls == ["https://example.com/old.jpg"]
    assert article.translations["en"].content[0].title == "Content"
    assert article.translations["en"].keywords == []


@pytest.mark.asyncio
async def test_new_subcategory_keeps_concurrent_category_edits(service, store, article_payload):
    store.docs("categories")["education"] = {
        "slug": "education",
        "titles": {"en": "Education"},
        "subcategories": [
            {"slug": "online", "titles": {"en": "Online"}},
            {"slug": "grammar", "titles": {"en": "Grammar"}},
        ],
    }
    # the category as it was read, before "grammar" was added by someone else
    stale = {
        "slug": "education",
        "titles": {"en": "Education"},
        "subcategories": [{"slug": "online", "titles": {"en": "Online"}}],
    }
    store.get = AsyncMock(return_value=stale)

    await service.create_article(
        article_payload(category="education", subcategory="exams"), create_category=True)

    slugs = [s["slug"] for s in store.docs("categories")["education"]["subcategories"]]
    assert slugs == ["online", "grammar", "exams"]


@pytest.mark.asyncio
async def test_slug_fallback_uses_service_clock(service):
    article = await service.create_article({
        "availableLanguages": ["ar"],
        "translations": {"ar": {"title": "مرحبا", "summary": "ملخص", "content": ["نص"]}},
    })

    assert article.slug == "article-1704067200"
