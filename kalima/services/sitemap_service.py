"""
XML sitemap of the public site: fixed pages, static pages, categories,
subcategories and published articles.
"""

import logging
import xml.etree.ElementTree as ET
from typing import List, NamedTuple, Optional

from kalima.exceptions import StoreError

logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


class SitemapUrl(NamedTuple):
    loc: str
    changefreq: str
    priority: float
    lastmod: Optional[str] = None


def fixed_urls(base_url: str) -> List[SitemapUrl]:
    return [
        SitemapUrl(base_url, "daily", 1.0),
        SitemapUrl(f"{base_url}/categories", "weekly", 0.9),
        SitemapUrl(f"{base_url}/search", "monthly", 0.6),
        SitemapUrl(f"{base_url}/login", "yearly", 0.3),
        SitemapUrl(f"{base_url}/register", "yearly", 0.3),
    ]


async def collect_urls(base_url: str, articles, categories, pages) -> List[SitemapUrl]:
    """
    Gather sitemap entries from the three content services.

    Args:
        base_url: public site root without trailing slash
        articles: ArticleService
        categories: CategoryService
        pages: StaticPageService
    """
    urls = fixed_urls(base_url)
    dynamic = []

    try:
        for page in await pages.list_pages():
            dynamic.append(SitemapUrl(f"{base_url}/page/{page.slug}", "monthly", 0.7))

        for category in await categories.list_categories():
            dynamic.append(SitemapUrl(
                f"{base_url}/categories/{category.slug}", "weekly", 0.8))
            for sub in category.subcategories:
                dynamic.append(SitemapUrl(
                    f"{base_url}/categories/{category.slug}/{sub.slug}", "weekly", 0.7))

        for article in await articles.list_articles():
            lastmod = article.created_at.isoformat() if article.created_at else None
            dynamic.append(SitemapUrl(
                f"{base_url}/articles/{article.slug}", "monthly", 0.8, lastmod))
    except StoreError as e:
        # fixed pages only when the store is unavailable
        logger.error(f"Error generating sitemap: {e}")
        return urls

    return urls + dynamic


def render_sitemap(urls: List[SitemapUrl]) -> str:
    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)
    for url in urls:
        node = ET.SubElement(urlset, "url")
        ET.SubElement(node, "loc").text = url.loc
        if url.lastmod:
            ET.SubElement(node, "lastmod").text = url.lastmod
        ET.SubElement(node, "changefreq").text = url.changefreq
        ET.SubElement(node, "priority").text = f"{url.priority:.1f}"

    body = ET.tostring(urlset, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body
