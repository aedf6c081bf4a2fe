from Models.Crawl import (
    ButtonData,
    CrawlResult,
    CrawlSettings,
    CrawlSummary,
    FeatureFlags,
    FormData,
    FormFieldData,
    HeadingData,
    ImageData,
    InputData,
    LinkData,
    LoginCredentials,
    NavigationData,
    PageData,
    SiteFiles,
    Viewport,
)
from Models.Errors import AuthenticationError, CrawlError

__all__ = [
    "AuthenticationError",
    "ButtonData",
    "CrawlError",
    "CrawlResult",
    "CrawlSettings",
    "CrawlSummary",
    "FeatureFlags",
    "FormData",
    "FormFieldData",
    "HeadingData",
    "ImageData",
    "InputData",
    "LinkData",
    "LoginCredentials",
    "NavigationData",
    "PageData",
    "SiteFiles",
    "Viewport",
]
