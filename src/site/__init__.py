"""Static site: entry pages, archive sidebar, placeholders."""

from meridian.site.builder import SiteBuilder
from meridian.site.pages import (
    EMPTY_SITE_MESSAGE,
    MISSING_ENTRY_MESSAGE,
    render_entry_page,
    render_index,
)

__all__ = [
    "EMPTY_SITE_MESSAGE",
    "MISSING_ENTRY_MESSAGE",
    "SiteBuilder",
    "render_entry_page",
    "render_index",
]
