"""
User profile model

The profile document is keyed by the identity provider's subject id.

Collection: users/
Document ID: uid (Firebase Auth UID)
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class SuggestedArticle(BaseModel):
    """An article idea submitted by a reader"""

    title: str = Field(..., min_length=1)
    language: str = Field(..., min_length=2)
    content: list[str] = Field(default_factory=list)


class UserProfile(BaseModel):
    uid: str = Field(..., description="Firebase Authentication UID")
    display_name: str = Field("", alias="displayName")
    email: str = ""
    photo_url: Optional[str] = Field(None, alias="photoURL")
    favorites: list[str] = Field(default_factory=list)
    suggested_articles: list[SuggestedArticle] = Field(
        default_factory=list, alias="suggestedArticles")
    is_admin: bool = Field(False, alias="isAdmin")

    model_config = ConfigDict(populate_by_name=True)


def firestore_user_to_model(doc_data: dict, uid: str) -> UserProfile:
    return UserProfile.model_validate({**doc_data, "uid": uid})


def user_model_to_firestore(user: UserProfile) -> dict:
    # Use by_alias=True to get camelCase for Firestore
    data = user.model_dump(by_alias=True)
    # uid is the document ID
    data.pop("uid", None)
    return data
