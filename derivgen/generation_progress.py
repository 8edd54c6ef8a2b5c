"""
GenerationProgress - Reports generation progress.
"""

import logging
from typing import Optional

from .file_reference import FileReference
from .generation_stats import GenerationStats


class GenerationProgress:
    """
    Logs a progress notice every `log_interval` processed files, with
    optional per-file output.
    """
    
    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 25,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.
        
        Args:
            show_files: If True, print each file as it's processed
            log_interval: Log progress every N processed files
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
    
    def on_file_created(self, file: FileReference, derivative_uri: str) -> None:
        if self.show_files:
            print(f"  [OK] {file.uri} -> {derivative_uri}")
    
    def on_file_skipped(self, file: FileReference, derivative_uri: str) -> None:
        if self.show_files:
            print(f"  [SKIP] {file.uri} -> {derivative_uri} exists")
    
    def on_file_failed(self, file: FileReference, error: Optional[str] = None) -> None:
        if self.show_files:
            print(f"  [FAILED] {file.uri} -> {error or 'failed'}")
    
    def on_progress_update(self, stats: GenerationStats) -> None:
        """
        Called after every processed file.
        
        Args:
            stats: Current generation statistics
        """
        if stats.processed and stats.processed % self.log_interval == 0:
            self.logger.info(
                f"Progress: {stats.processed}/{stats.total_to_process} "
                f"({stats.percent_complete}%)"
            )
    
    def __call__(self, stats: GenerationStats) -> None:
        """Allow use as callback for stats updates."""
        self.on_progress_update(stats)
