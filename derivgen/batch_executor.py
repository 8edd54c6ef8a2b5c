"""
BatchExecutor - Creates derivatives for file ids in fixed-size batches.
"""

import gc
import logging
from typing import Iterator, List, Optional, Sequence

from .exceptions import StorageError
from .file_reference import FileReference
from .file_storage import FileStorage
from .generation_progress import GenerationProgress
from .generation_stats import GenerationStats
from .generation_options import clamp_batch_size
from .image_style import ImageStyle
from .stream_wrappers import StreamWrappers


def chunked(items: Sequence[int], size: int) -> Iterator[List[int]]:
    """Split a sequence into contiguous chunks of at most `size` items."""
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


class BatchExecutor:
    """
    Runs derivative creation over batches of managed files.

    Existing derivatives are skipped unless forced, so a re-run after an
    interruption picks up where the last one stopped.
    """

    GC_EVERY_BATCHES = 5

    def __init__(
        self,
        file_storage: FileStorage,
        stream_wrappers: StreamWrappers,
        progress: Optional[GenerationProgress] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize executor.

        Args:
            file_storage: Loads FileReferences for each batch
            stream_wrappers: Checks whether derivatives already exist
            progress: Progress reporter (default: notice every 25 files)
            logger: Optional logger instance
        """
        self.files = file_storage
        self.stream_wrappers = stream_wrappers
        self.logger = logger or logging.getLogger(__name__)
        self.progress = progress or GenerationProgress(logger=self.logger)
        self.stats = GenerationStats()

    def execute(
        self,
        file_ids: Sequence[int],
        style: ImageStyle,
        batch_size: int = 20,
        force: bool = False,
        limit: int = 0
    ) -> GenerationStats:
        """
        Create derivatives for the given files.

        Args:
            file_ids: Ordered file ids
            style: Image style to generate
            batch_size: Files per batch, clamped to 1-50
            force: Recreate derivatives that already exist
            limit: Only the first N files (0 = all)

        Returns:
            GenerationStats with the final counters
        """
        if limit and limit > 0:
            file_ids = list(file_ids)[:limit]
        batch_size = clamp_batch_size(batch_size)

        self.stats = GenerationStats(total_to_process=len(file_ids))

        for batch_num, batch_fids in enumerate(chunked(file_ids, batch_size)):
            self._process_batch(batch_fids, style, force)

            self.files.reset_cache(batch_fids)
            if (batch_num + 1) % self.GC_EVERY_BATCHES == 0:
                gc.collect()

        self.logger.info(
            f"Generation completed! Total: {self.stats.processed}, "
            f"Success: {self.stats.success}, Failed: {self.stats.failed}, "
            f"Skipped: {self.stats.skipped}"
        )
        return self.stats

    def _process_batch(self, batch_fids: List[int], style: ImageStyle, force: bool) -> None:
        try:
            files = self.files.load_multiple(batch_fids)
        except StorageError as e:
            self.logger.error(f"Cannot load files {batch_fids[0]}-{batch_fids[-1]}: {e}")
            for _ in batch_fids:
                self.stats.record_failure(f"File load failed: {e}")
                self.progress.on_progress_update(self.stats)
            return

        if len(files) < len(batch_fids):
            loaded = {f.fid for f in files}
            missing = [fid for fid in batch_fids if fid not in loaded]
            self.logger.debug(f"No managed file for ids: {missing}")

        for file in files:
            self._process_file(file, style, force)
            self.progress.on_progress_update(self.stats)

    def _process_file(self, file: FileReference, style: ImageStyle, force: bool) -> None:
        """Process a single file and update the counters."""
        original_uri = file.uri
        try:
            derivative_uri = style.build_uri(original_uri)

            if not force and self.stream_wrappers.exists(derivative_uri):
                self.stats.record_skip()
                self.progress.on_file_skipped(file, derivative_uri)
                return

            if style.create_derivative(original_uri, derivative_uri):
                self.stats.record_success()
                self.progress.on_file_created(file, derivative_uri)
            else:
                self.stats.record_failure(f"Failed to create derivative for: {original_uri}")
                self.logger.debug(f"Failed to create derivative for: {original_uri}")
                self.progress.on_file_failed(file)
        except Exception as e:
            self.stats.record_failure(f"{original_uri}: {e}")
            self.logger.error(f"Exception creating derivative for {original_uri}: {e}")
            self.progress.on_file_failed(file, str(e))
