"""
Image Derivative Generation for Drupal sites

Regenerates image style derivatives from the command line:
    1. Discover: find display configurations rendering a field with the style
    2. Resolve: collect the files referenced through those fields
    3. Execute: create missing derivatives in batches

Reads the site's config export (YAML) and database (MySQL); writes
derivatives to local (public://, private://) or S3 (s3://) storage.
"""

__version__ = "1.0.0"

from .results import ErrorKind, Failure, Result
from .site_config import SiteConfig
from .stream_wrappers import StreamWrappers
from .image_toolkit import ImageToolkit
from .image_style import ImageStyle
from .image_style_storage import ImageStyleStorage
from .display import DisplayBinding, EntityViewDisplay
from .display_storage import DisplayStorage
from .display_scanner import DisplayScanner
from .file_reference import FileReference
from .drupal_db import DrupalDb
from .entity_storage import EntityStorage
from .file_storage import FileStorage
from .file_resolver import FileResolver, ResolvedFiles
from .generation_options import GenerateOptions
from .generation_stats import GenerationStats
from .generation_progress import GenerationProgress
from .batch_executor import BatchExecutor
from .usage import UsageInspector, UsageRow
from .reporter import Reporter
from .workflow import DerivativeWorkflow

__all__ = [
    "ErrorKind",
    "Failure",
    "Result",
    "SiteConfig",
    "StreamWrappers",
    "ImageToolkit",
    "ImageStyle",
    "ImageStyleStorage",
    "DisplayBinding",
    "EntityViewDisplay",
    "DisplayStorage",
    "DisplayScanner",
    "FileReference",
    "DrupalDb",
    "EntityStorage",
    "FileStorage",
    "FileResolver",
    "ResolvedFiles",
    "GenerateOptions",
    "GenerationStats",
    "GenerationProgress",
    "BatchExecutor",
    "UsageInspector",
    "UsageRow",
    "Reporter",
    "DerivativeWorkflow",
]
