"""
Static page model (about, contact, privacy ...)

Collection: staticPages/
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class StaticPageTranslation(BaseModel):
    title: str
    content: str
    keywords: list[str] = Field(default_factory=list)


class StaticPage(BaseModel):
    id: Optional[str] = None
    slug: str
    translations: dict[str, StaticPageTranslation]
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


def firestore_page_to_model(doc: dict, doc_id: str) -> StaticPage:
    return StaticPage.model_validate({**doc, "id": doc_id})


def page_model_to_firestore(page: StaticPage) -> dict:
    data = page.model_dump(by_alias=True)
    data.pop("id", None)
    return data
