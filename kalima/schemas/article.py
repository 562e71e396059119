"""
Article submission schemas

These models only check the shape of an incoming payload. The payload itself
is passed on untouched to the normalizer, so unknown keys are allowed.
"""

from pydantic import (
    BaseModel, Field, ConfigDict, StrictBool, ValidationInfo, field_validator, model_validator,
)
from typing import Any, Optional

from kalima.models.article import Language
from kalima.utils.slugs import is_valid_slug


class ContentSectionSubmission(BaseModel):
    title: Optional[str] = None
    paragraph: str = Field(..., min_length=1)
    references: Optional[list[str]] = None

    model_config = ConfigDict(extra="allow")

    @model_validator(mode="before")
    @classmethod
    def accept_bare_string(cls, value: Any) -> Any:
        """Legacy articles store a section as a plain paragraph string"""
        if isinstance(value, str):
            return {"paragraph": value}
        return value


class TranslationSubmission(BaseModel):
    title: str = Field(..., min_length=1)
    summary: str = Field(..., min_length=1)
    keywords: Optional[list[str]] = None
    content: list[ContentSectionSubmission] = Field(..., min_length=1)

    model_config = ConfigDict(extra="allow")

    @field_validator("title", "summary")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Must not be blank")
        return v


class ArticleSubmission(BaseModel):
    slug: Optional[str] = None
    title: Optional[str] = None
    available_languages: list[Language] = Field(
        ..., min_length=1, alias="availableLanguages")
    translations: dict[Language, TranslationSubmission]
    draft: Optional[StrictBool] = None
    featured: Optional[StrictBool] = None
    popular: Optional[StrictBool] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    image_urls: Optional[list[str]] = Field(None, alias="imageUrls")
    image_descriptions: Optional[list[str]] = Field(
        None, alias="imageDescriptions")

    model_config = ConfigDict(
        populate_by_name=True,
        extra="allow",
        json_schema_extra={
            "example": {
                "availableLanguages": ["en"],
                "translations": {
                    "en": {
                        "title": "50 Common Words for Travel",
                        "summary": "Useful vocabulary for travelers.",
                        "content": [{"title": "Introduction", "paragraph": "..."}],
                    }
                },
                "category": "language-learning",
                "subcategory": "vocabulary",
                "draft": True,
            }
        },
    )

    @field_validator("slug")
    @classmethod
    def slug_format(cls, v: Optional[str]) -> Optional[str]:
        # blank slugs are derived later from the title
        if v is not None and v.strip() and not is_valid_slug(v):
            raise ValueError(
                "Slug must contain only lowercase letters, numbers, and hyphens")
        return v

    @field_validator("image_descriptions")
    @classmethod
    def descriptions_fit_images(
            cls, v: Optional[list[str]], info: ValidationInfo) -> Optional[list[str]]:
        urls = info.data.get("image_urls")
        if urls is None:
            urls = [info.data["image_url"]] if info.data.get("image_url") else []
        # without urls the article gets one placeholder image
        if v is not None and len(v) > max(len(urls), 1):
            raise ValueError("Cannot have more image descriptions than images")
        return v


class DraftUpdate(BaseModel):
    draft: bool
