"""littag - literature collection with attribute tags.

A tool for keeping bibliographic records as JSON files per project,
tagging them with user-defined attributes, and exporting tidy
CSV/TSV extracts.
"""

__version__ = "0.3.0"

from littag.config import Settings
from littag.models.literature import Literature, LiteratureBase

__all__ = ["Literature", "LiteratureBase", "Settings", "__version__"]
