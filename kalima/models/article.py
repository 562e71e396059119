"""
Article model and Firestore conversion helpers

Collection: articles/
Document ID: generated by Firestore, the human-readable key is ``slug``
"""

from datetime import datetime, timezone
from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict


Language = Literal["en", "fr", "es", "de", "ar"]
SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "fr", "es", "de", "ar")


def utc_now():
    """Get current UTC datetime (timezone-aware)"""
    return datetime.now(timezone.utc)


class Author(BaseModel):
    uid: str = "system"
    display_name: str = Field("System", alias="displayName")
    photo_url: Optional[str] = Field(None, alias="photoURL")

    model_config = ConfigDict(populate_by_name=True)


class ContentSection(BaseModel):
    """One titled block of body text inside a translation"""

    title: str = "Section"
    paragraph: str
    references: list[str] = Field(default_factory=list)


class Translation(BaseModel):
    title: str = ""
    summary: str = ""
    keywords: list[str] = Field(default_factory=list)
    content: list[ContentSection] = Field(..., min_length=1)


class Article(BaseModel):
    id: Optional[str] = None
    slug: str
    title: str
    category: str = "general"
    subcategory: str = "other"
    author: Author = Field(default_factory=Author)
    available_languages: list[Language] = Field(
        ..., min_length=1, alias="availableLanguages")
    translations: dict[Language, Translation]
    draft: bool = True
    featured: bool = False
    popular: bool = False
    image_urls: list[str] = Field(..., min_length=1, alias="imageUrls")
    image_descriptions: list[str] = Field(
        default_factory=list, alias="imageDescriptions")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "slug": "e-learning-online-education",
                "title": "E-learning and Online Education",
                "category": "education",
                "subcategory": "online-learning",
                "availableLanguages": ["en"],
                "translations": {
                    "en": {
                        "title": "E-learning and Online Education",
                        "summary": "How online learning changes education.",
                        "keywords": ["e-learning"],
                        "content": [
                            {"title": "Introduction", "paragraph": "...", "references": []}
                        ],
                    }
                },
                "draft": False,
                "imageUrls": ["https://images.unsplash.com/photo-1517842645767-c639042777db"],
                "imageDescriptions": ["Student using a laptop"],
            }
        },
    )


def firestore_article_to_model(doc: dict, doc_id: str) -> Article:
    return Article.model_validate({**doc, "id": doc_id})


def article_model_to_firestore(article: Article) -> dict:
    data = article.model_dump(by_alias=True)
    data.pop("id", None)
    return data
