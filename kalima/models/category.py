"""
Category model

Collection: categories/
Document ID: category slug
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class Subcategory(BaseModel):
    slug: str
    titles: dict[str, str] = Field(default_factory=dict)


class Category(BaseModel):
    slug: str
    titles: dict[str, str] = Field(default_factory=dict)
    subcategories: list[Subcategory] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    def find_subcategory(self, slug: str) -> Optional[Subcategory]:
        for subcategory in self.subcategories:
            if subcategory.slug == slug:
                return subcategory
        return None


def firestore_category_to_model(doc: dict, doc_id: str) -> Category:
    # older documents were written without the slug field
    return Category.model_validate({**doc, "slug": doc.get("slug") or doc_id})


def category_model_to_firestore(category: Category) -> dict:
    return category.model_dump(by_alias=True)
