"""
Static page submission schemas
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional

from kalima.models.article import Language
from kalima.utils.slugs import is_valid_slug


class StaticPageTranslationSubmission(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    keywords: Optional[list[str]] = None


class StaticPageSubmission(BaseModel):
    slug: Optional[str] = None
    translations: dict[Language, StaticPageTranslationSubmission] = Field(
        ..., min_length=1)

    model_config = ConfigDict(extra="allow")

    @field_validator("slug")
    @classmethod
    def slug_format(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v.strip() and not is_valid_slug(v):
            raise ValueError(
                "Slug must contain only lowercase letters, numbers, and hyphens")
        return v
