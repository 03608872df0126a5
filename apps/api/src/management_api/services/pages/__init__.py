from management_api.services.pages.classifier import classify_path
from management_api.services.pages.importer import PageImportError, import_directory
from management_api.services.pages.service import InvalidPageError, create_page
from management_api.services.pages.types import ImportResult, Page, PageSource, PageType

__all__ = [
    "ImportResult",
    "InvalidPageError",
    "Page",
    "PageImportError",
    "PageSource",
    "PageType",
    "classify_path",
    "create_page",
    "import_directory",
]
