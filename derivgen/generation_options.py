"""
GenerateOptions - Settings for one generate run.
"""

from dataclasses import dataclass

MIN_BATCH_SIZE = 1
MAX_BATCH_SIZE = 50


def clamp_batch_size(value: int) -> int:
    return max(MIN_BATCH_SIZE, min(int(value), MAX_BATCH_SIZE))


@dataclass
class GenerateOptions:
    """
    Options for the generate command, normalized on construction.
    
    Attributes:
        force: Recreate derivatives that already exist
        limit: Process at most this many files (0 = no limit)
        batch_size: Files per batch, clamped to 1-50
        bundle: Only displays of this bundle ('' = any)
        view_mode: Only displays in this view mode ('' = any)
        field: Only this image field ('' = any)
        all_files: Process every image file instead of referenced ones
    """
    force: bool = False
    limit: int = 0
    batch_size: int = 20
    bundle: str = ''
    view_mode: str = ''
    field: str = ''
    all_files: bool = False
    
    def __post_init__(self):
        self.force = bool(self.force)
        self.all_files = bool(self.all_files)
        self.limit = max(0, int(self.limit or 0))
        self.batch_size = clamp_batch_size(self.batch_size if self.batch_size is not None else 20)
        self.bundle = self.bundle or ''
        self.view_mode = self.view_mode or ''
        self.field = self.field or ''
    
    @property
    def has_filters(self) -> bool:
        return bool(self.bundle or self.view_mode or self.field)
    
    def apply_limit(self, file_ids: list) -> list:
        """First `limit` ids, or all of them when unlimited."""
        return file_ids[:self.limit] if self.limit > 0 else list(file_ids)
