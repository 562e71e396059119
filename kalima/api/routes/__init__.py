"""
API route modules
"""

__all__ = ["articles", "categories", "static_pages", "users", "sitemap"]
