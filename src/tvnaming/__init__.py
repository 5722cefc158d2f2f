"""tvnaming core package.

The package is organized into focused modules:

- **parser**: ``NameParser``, scoring every catalog rule against a name
- **reconcile**: merging the full-path, file-name and directory parses of a path
- **catalog**: ordered, self-tested pattern rule catalogs loaded from ``release_patterns.yaml``
- **sanitize**: series-name cleanup and scene-name normalization
- **media_files**: media extension whitelist, sample/extras filtering and discovery
- **date_utils**: air-date inference from captured digits
- **quality**: quality tier detection
- **config**: YAML configuration with environment overrides
- **cli**: the ``tvnaming`` command

Most callers only need ``load_catalog`` and ``NameParser``
(``NameParser(load_catalog()).parse_file(path)``).
"""

from .catalog import CatalogError, PatternCatalog, load_catalog
from .media_files import is_media_extension, is_media_file
from .models import ParseResult
from .parser import NameParser, NoMatchError
from .quality import Quality, quality_from_name
from .reconcile import InvalidFieldError
from .sanitize import clean_series_name, full_sanitize_scene_name, sanitize_scene_name

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CatalogError",
    "InvalidFieldError",
    "NameParser",
    "NoMatchError",
    "ParseResult",
    "PatternCatalog",
    "Quality",
    "clean_series_name",
    "full_sanitize_scene_name",
    "is_media_extension",
    "is_media_file",
    "load_catalog",
    "quality_from_name",
    "sanitize_scene_name",
]
