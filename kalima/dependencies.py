"""
FastAPI dependency injection for the store and services

The store, slug guard and identity provider are created once in the
application lifespan and kept on ``app.state``. Tests override ``get_store``
(and ``get_identity_provider``) through ``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from kalima.services.article_service import ArticleService
from kalima.services.category_service import CategoryService
from kalima.services.static_page_service import StaticPageService
from kalima.services.uniqueness import SlugGuard
from kalima.services.user_service import UserService


def get_store(request: Request):
    return request.app.state.store


def get_slug_guard(request: Request, store=Depends(get_store)) -> SlugGuard:
    guard = getattr(request.app.state, "slug_guard", None)
    if guard is None or guard.store is not store:
        guard = SlugGuard(store)
        request.app.state.slug_guard = guard
    return guard


def get_identity_provider(request: Request):
    return getattr(request.app.state, "identity", None)


def get_article_service(
    store=Depends(get_store), guard: SlugGuard = Depends(get_slug_guard)
) -> ArticleService:
    return ArticleService(store, guard)


def get_category_service(store=Depends(get_store)) -> CategoryService:
    return CategoryService(store)


def get_static_page_service(
    store=Depends(get_store), guard: SlugGuard = Depends(get_slug_guard)
) -> StaticPageService:
    return StaticPageService(store, guard)


def get_user_service(
    store=Depends(get_store), identity=Depends(get_identity_provider)
) -> UserService:
    return UserService(store, identity)
