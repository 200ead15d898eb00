from .base import ServiceBase
from .pagination import Page, build_page, page_offset
from .policy import default_currency, resolve_currency

__all__ = ["ServiceBase", "Page", "build_page", "page_offset", "default_currency", "resolve_currency"]
