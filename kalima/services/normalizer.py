"""
Field normalization for article payloads.

``normalize_article_fields`` takes a partially filled article (camelCase
dict, as submitted or as read from Firestore) and returns a fully defaulted
copy. The caller's object is never modified.
"""

import copy
import time
from typing import Any, Dict, List, Optional

from kalima.utils.slugs import slugify

PLACEHOLDER_IMAGE_URL = (
    "https://images.unsplash.com/photo-1497633762265-9d179a990aa6"
    "?ixlib=rb-1.2.1&auto=format&fit=crop&w=1200&h=600&q=80"
)
DEFAULT_CATEGORY = "general"
DEFAULT_SUBCATEGORY = "other"
DEFAULT_TITLE = "Untitled Article"
SYSTEM_AUTHOR = {"uid": "system", "displayName": "System"}


def _non_blank(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _translation_titles(article: Dict[str, Any]) -> List[str]:
    """Translation titles in fallback order: English, then available languages, then the rest"""
    translations = article.get("translations")
    if not isinstance(translations, dict):
        return []

    order = ["en"]
    order += [lang for lang in article.get("availableLanguages") or [] if isinstance(lang, str)]
    order += list(translations.keys())

    titles = []
    seen = set()
    for lang in order:
        if lang in seen:
            continue
        seen.add(lang)
        translation = translations.get(lang)
        if isinstance(translation, dict) and _non_blank(translation.get("title")):
            titles.append(translation["title"].strip())
    return titles


def resolve_title(article: Dict[str, Any]) -> str:
    """explicit title -> English title -> first translation title -> "Untitled Article" """
    if _non_blank(article.get("title")):
        return article["title"].strip()
    titles = _translation_titles(article)
    return titles[0] if titles else DEFAULT_TITLE


def derive_slug(article: Dict[str, Any], now: Optional[float] = None) -> str:
    candidates = []
    if _non_blank(article.get("title")):
        candidates.append(article["title"])
    candidates += _translation_titles(article)

    for title in candidates:
        slug = slugify(title)
        if slug:
            return slug
    return f"article-{int(now if now is not None else time.time())}"


def _normalize_images(article: Dict[str, Any], title: str) -> None:
    legacy_url = article.pop("imageUrl", None)
    if article.get("imageUrls") is None and _non_blank(legacy_url):
        article["imageUrls"] = [legacy_url]

    raw_urls = list(article.get("imageUrls") or [])
    raw_descriptions = list(article.get("imageDescriptions") or [])

    # a blank url takes its description with it
    urls = []
    descriptions = []
    for index, url in enumerate(raw_urls):
        if not _non_blank(url):
            continue
        urls.append(url)
        if index < len(raw_descriptions):
            descriptions.append(raw_descriptions[index])
    descriptions += raw_descriptions[len(raw_urls):]

    if not urls:
        urls = [PLACEHOLDER_IMAGE_URL]
    article["imageUrls"] = urls

    while len(descriptions) < len(urls):
        descriptions.append(f"Image {len(descriptions) + 1} for {title}")
    article["imageDescriptions"] = descriptions


def _normalize_author(author: Any) -> Dict[str, Any]:
    if isinstance(author, dict) and author:
        normalized = dict(author)
        normalized["uid"] = normalized.get("uid") or SYSTEM_AUTHOR["uid"]
        normalized["displayName"] = (
            normalized.get("displayName") or SYSTEM_AUTHOR["displayName"])
        return normalized
    if _non_blank(author):
        # legacy documents kept the author as a free-text name
        return {"uid": SYSTEM_AUTHOR["uid"], "displayName": author.strip()}
    return dict(SYSTEM_AUTHOR)


def normalize_article_fields(article: Dict[str, Any], now: Optional[float] = None) -> Dict[str, Any]:
    """Return a fully defaulted copy of ``article``.

    Args:
        article: raw article payload (camelCase keys)
        now: unix time used for the slug fallback, defaults to the clock

    Returns:
        New dict with slug, images, category, author and title filled in
    """
    result = copy.deepcopy(article)
    title = resolve_title(result)

    if not _non_blank(result.get("slug")):
        result["slug"] = derive_slug(result, now)

    _normalize_images(result, title)

    if not _non_blank(result.get("category")):
        result["category"] = DEFAULT_CATEGORY
    if not _non_blank(result.get("subcategory")):
        result["subcategory"] = DEFAULT_SUBCATEGORY

    result["author"] = _normalize_author(result.get("author"))
    result["title"] = title

    result["draft"] = result.get("draft") if isinstance(result.get("draft"), bool) else True
    for flag in ("featured", "popular"):
        result[flag] = bool(result.get(flag, False))

    languages = []
    for lang in result.get("availableLanguages") or []:
        if lang not in languages:
            languages.append(lang)
    result["availableLanguages"] = languages

    return result
