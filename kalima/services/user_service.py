"""
User profiles: favorites and article suggestions.

Favorites and suggestions are changed with Firestore array union/remove, so
adding twice or removing something absent is harmless.
"""

import logging
from typing import List

from kalima.exceptions import ConflictError, NotFoundError
from kalima.models.user import (
    SuggestedArticle,
    UserProfile,
    firestore_user_to_model,
    user_model_to_firestore,
)
from kalima.schemas.user import UserCreate

logger = logging.getLogger(__name__)

USERS = "users"


class UserService:

    def __init__(self, store, identity=None):
        self.store = store
        self.identity = identity

    async def get_user(self, uid: str) -> UserProfile:
        doc = await self.store.get(USERS, uid)
        if doc is None:
            raise NotFoundError("User not found")
        return firestore_user_to_model(doc, uid)

    async def create_user(self, uid: str, payload: UserCreate) -> UserProfile:
        """Create the profile document for an identity-provider subject"""
        if await self.store.get(USERS, uid) is not None:
            raise ConflictError("User profile already exists")

        data = payload.model_dump(by_alias=True, exclude_none=True)
        if self.identity and not (data.get("displayName") and data.get("email")):
            # fill gaps from Firebase Auth, caller-provided values win
            provider_data = await self.identity.get_profile(uid)
            for key, value in provider_data.items():
                if value and not data.get(key):
                    data[key] = value

        user = UserProfile.model_validate({**data, "uid": uid})
        try:
            await self.store.create(USERS, uid, user_model_to_firestore(user))
        except ConflictError:
            raise ConflictError("User profile already exists")
        logger.info(f"Created profile for user {uid}")
        return user

    async def update_favorites(self, uid: str, article_id: str, action: str) -> UserProfile:
        await self.get_user(uid)
        if action == "add":
            await self.store.array_union(USERS, uid, "favorites", [article_id])
        elif action == "remove":
            await self.store.array_remove(USERS, uid, "favorites", [article_id])
        else:
            raise ValueError(f"Unknown favorites action: {action}")
        return await self.get_user(uid)

    async def add_suggestion(self, uid: str, suggestion: SuggestedArticle) -> UserProfile:
        await self.get_user(uid)
        await self.store.array_union(
            USERS, uid, "suggestedArticles", [suggestion.model_dump()])
        logger.info(f"User {uid} suggested '{suggestion.title}' ({suggestion.language})")
        return await self.get_user(uid)

    async def list_users_with_suggestions(self) -> List[UserProfile]:
        docs = await self.store.list(USERS)
        users = [firestore_user_to_model(doc, doc_id) for doc_id, doc in docs]
        return [u for u in users if u.suggested_articles]

    async def delete_suggestion(self, uid: str, index: int) -> UserProfile:
        user = await self.get_user(uid)
        if index < 0 or index >= len(user.suggested_articles):
            raise NotFoundError("Suggestion not found")

        remaining = list(user.suggested_articles)
        del remaining[index]
        await self.store.update(USERS, uid, {
            "suggestedArticles": [s.model_dump() for s in remaining],
        })
        return await self.get_user(uid)
