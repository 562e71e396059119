from kalima.models.article import Article, Author, ContentSection, Translation
from kalima.models.category import Category, Subcategory
from kalima.models.static_page import StaticPage, StaticPageTranslation
from kalima.models.user import SuggestedArticle, UserProfile

__all__ = [
    "Article",
    "Author",
    "ContentSection",
    "Translation",
    "Category",
    "Subcategory",
    "StaticPage",
    "StaticPageTranslation",
    "SuggestedArticle",
    "UserProfile",
]
