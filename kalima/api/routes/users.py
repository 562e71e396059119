"""
User profile API endpoints: favorites and suggestions
"""

from fastapi import APIRouter, Depends, status
from typing import List

from kalima.dependencies import get_user_service
from kalima.models.user import SuggestedArticle, UserProfile
from kalima.schemas.user import FavoriteUpdate, UserCreate
from kalima.services.user_service import UserService

# Create router
router = APIRouter(prefix="/api", tags=["Users"])


@router.get("/users/{uid}", response_model=UserProfile)
async def get_user(uid: str, service: UserService = Depends(get_user_service)):
    return await service.get_user(uid)


@router.post("/users/{uid}", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
async def create_user(
    uid: str,
    payload: UserCreate,
    service: UserService = Depends(get_user_service),
):
    """
    Create the profile of an identity-provider user

    - **displayName** / **email** / **photoURL**: optional, read from
      Firebase Auth when omitted
    """
    return await service.create_user(uid, payload)


@router.patch("/users/{uid}/favorites")
async def update_favorites(
    uid: str,
    payload: FavoriteUpdate,
    service: UserService = Depends(get_user_service),
):
    user = await service.update_favorites(uid, payload.article_id, payload.action)
    return {"message": "Favorites updated successfully", "favorites": user.favorites}


@router.post("/users/{uid}/suggestions", status_code=status.HTTP_201_CREATED)
async def add_suggestion(
    uid: str,
    payload: SuggestedArticle,
    service: UserService = Depends(get_user_service),
):
    await service.add_suggestion(uid, payload)
    return {"message": "Suggestion added successfully"}


@router.delete("/users/{uid}/suggestions/{index}", response_model=UserProfile)
async def delete_suggestion(
    uid: str,
    index: int,
    service: UserService = Depends(get_user_service),
):
    return await service.delete_suggestion(uid, index)


@router.get("/suggestions", response_model=List[UserProfile])
async def list_suggestions(service: UserService = Depends(get_user_service)):
    """Users that have at least one pending suggestion"""
    return await service.list_users_with_suggestions()
