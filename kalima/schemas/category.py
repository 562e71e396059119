"""
Category submission schemas
"""

from pydantic import AfterValidator, BaseModel, Field, field_validator
from typing import Annotated

from kalima.utils.slugs import is_valid_slug


def _check_slug(v: str) -> str:
    if not is_valid_slug(v):
        raise ValueError(
            "Slug must contain only lowercase letters, numbers, and hyphens")
    return v


Slug = Annotated[str, AfterValidator(_check_slug)]


class SubcategorySubmission(BaseModel):
    slug: Slug
    titles: dict[str, str] = Field(default_factory=dict)


class CategorySubmission(BaseModel):
    slug: Slug
    titles: dict[str, str] = Field(..., min_length=1)
    subcategories: list[SubcategorySubmission] = Field(default_factory=list)

    @field_validator("titles")
    @classmethod
    def english_title_required(cls, v: dict[str, str]) -> dict[str, str]:
        if not (v.get("en") or "").strip():
            raise ValueError("English title is required")
        return v
