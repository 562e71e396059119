"""
Translation reconciliation.

Keeps ``availableLanguages`` and the keys of ``translations`` in exact
correspondence and backfills every translation so it always has keywords and
at least one structured content section.
"""

import copy
from typing import Any, Dict, List, Union

from kalima.exceptions import InvariantError

STRING_CONTENT_TITLE = "Content"
SECTION_TITLE = "Section"
PLACEHOLDER_PARAGRAPH = "Content coming soon."

ContentItem = Union[str, Dict[str, Any]]


def placeholder_section() -> Dict[str, Any]:
    return {
        "title": STRING_CONTENT_TITLE,
        "paragraph": PLACEHOLDER_PARAGRAPH,
        "references": [],
    }


def upgrade_content_item(item: ContentItem) -> Dict[str, Any]:
    """Turn a legacy string section into a structured one, or fill a partial section"""
    if isinstance(item, str):
        return {
            "title": STRING_CONTENT_TITLE,
            "paragraph": item if item.strip() else PLACEHOLDER_PARAGRAPH,
            "references": [],
        }

    section = dict(item) if isinstance(item, dict) else {}
    title = section.get("title")
    if not isinstance(title, str) or not title.strip():
        section["title"] = SECTION_TITLE
    paragraph = section.get("paragraph")
    if not isinstance(paragraph, str) or not paragraph.strip():
        section["paragraph"] = PLACEHOLDER_PARAGRAPH
    if not isinstance(section.get("references"), list):
        section["references"] = []
    return section


def backfill_translation(translation: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(translation)
    if not isinstance(result.get("keywords"), list):
        result["keywords"] = []

    content = result.get("content")
    if not isinstance(content, list) or not content:
        result["content"] = [placeholder_section()]
    else:
        result["content"] = [upgrade_content_item(item) for item in content]
    return result


def find_language_mismatches(article: Dict[str, Any]) -> List[str]:
    available = article.get("availableLanguages") or []
    translations = article.get("translations") or {}

    problems = []
    for lang in available:
        if lang not in translations:
            problems.append(
                f"Language {lang} is listed as available but has no translation")
    for lang in translations:
        if lang not in available:
            problems.append(
                f"Translation for {lang} exists but language is not listed as available")
    return problems


def backfill_translations(article: Dict[str, Any]) -> Dict[str, Any]:
    """Backfill every translation without checking language correspondence"""
    result = copy.deepcopy(article)
    translations = result.get("translations")
    if not isinstance(translations, dict):
        translations = {}
    result["translations"] = {
        lang: backfill_translation(t if isinstance(t, dict) else {})
        for lang, t in translations.items()
    }
    return result


def reconcile_translations(article: Dict[str, Any]) -> Dict[str, Any]:
    """Enforce ``set(availableLanguages) == keys(translations)`` and backfill.

    Raises:
        InvariantError: with every mismatch, before anything is written
    """
    problems = find_language_mismatches(article)
    if problems:
        raise InvariantError("; ".join(problems))
    return backfill_translations(article)
