"""
Schema validation for article, category and static page submissions.

Every violation is collected and reported together as ``{field, message}``
pairs, where ``field`` is the dotted path inside the payload.
"""

import logging
from typing import Any, Dict, List, Type

from pydantic import BaseModel, ValidationError as PydanticValidationError

from kalima.exceptions import ValidationError
from kalima.schemas.article import ArticleSubmission
from kalima.schemas.category import CategorySubmission
from kalima.schemas.static_page import StaticPageSubmission

logger = logging.getLogger(__name__)


def format_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    errors = []
    for err in exc.errors():
        path = ".".join(str(part) for part in err["loc"] if part != "[key]")
        message = err["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": path or "body", "message": message})
    return errors


def _check(schema: Type[BaseModel], raw: Any) -> None:
    if not isinstance(raw, dict):
        raise ValidationError(
            [{"field": "body", "message": "Payload must be a JSON object"}])
    try:
        schema.model_validate(raw)
    except PydanticValidationError as e:
        errors = format_errors(e)
        logger.info(f"Rejected {schema.__name__}: {len(errors)} violation(s)")
        raise ValidationError(errors)


def validate_article_submission(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Check an article payload and return it unchanged.

    Raises:
        ValidationError: listing every violated field
    """
    _check(ArticleSubmission, raw)
    return raw


def validate_category_submission(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Check a category payload; subcategory slugs must be unique in it."""
    _check(CategorySubmission, raw)

    seen = set()
    errors = []
    for index, sub in enumerate(raw.get("subcategories") or []):
        slug = sub.get("slug")
        if slug in seen:
            errors.append({
                "field": f"subcategories.{index}.slug",
                "message": f"Duplicate subcategory slug '{slug}'",
            })
        seen.add(slug)
    if errors:
        raise ValidationError(errors)
    return raw


def validate_static_page_submission(raw: Dict[str, Any]) -> Dict[str, Any]:
    _check(StaticPageSubmission, raw)
    return raw
