"""
User profile request schemas
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Literal, Optional


class UserCreate(BaseModel):
    """Profile fields; anything omitted is read from the identity provider"""

    display_name: Optional[str] = Field(None, alias="displayName")
    email: Optional[str] = None
    photo_url: Optional[str] = Field(None, alias="photoURL")

    model_config = ConfigDict(populate_by_name=True)


class FavoriteUpdate(BaseModel):
    article_id: str = Field(..., min_length=1, alias="articleId")
    action: Literal["add", "remove"]

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"articleId": "e-learning-online-education", "action": "add"}
        },
    )
