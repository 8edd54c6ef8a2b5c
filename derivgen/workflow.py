"""
DerivativeWorkflow - Discover, resolve and execute derivative generation.
"""

import logging
from typing import List, Optional

from .batch_executor import BatchExecutor
from .display import DisplayBinding
from .display_scanner import DisplayScanner
from .file_resolver import FileResolver
from .generation_options import GenerateOptions
from .generation_stats import GenerationStats
from .results import Result
from .usage import UsageInspector, UsageRow


class DerivativeWorkflow:
    """
    Runs the generate and show-usage commands.

    generate goes Discover -> Resolve -> Execute. An unknown style aborts
    before any lookup; errors inside Resolve and Execute only skip the
    binding or file they hit.
    """

    def __init__(
        self,
        scanner: DisplayScanner,
        resolver: FileResolver,
        executor: BatchExecutor,
        inspector: UsageInspector,
        logger: Optional[logging.Logger] = None
    ):
        self.scanner = scanner
        self.resolver = resolver
        self.executor = executor
        self.inspector = inspector
        self.logger = logger or logging.getLogger(__name__)

    def generate(self, style_name: str, options: GenerateOptions) -> Result[GenerationStats]:
        """
        Generate derivatives for one image style.

        Returns:
            Result with the run's stats; a fatal failure for an unknown
            style; a success with value None when there was nothing to do
        """
        style_result = self.scanner.load_style(style_name)
        if not style_result.ok:
            self.logger.error(style_result.failure.message)
            return Result(failure=style_result.failure)
        style = style_result.value

        skipped_sources = 0
        if options.all_files:
            if options.has_filters:
                self.logger.info("--bundle, --view-mode and --field are ignored with --all-files")
            resolved = self.resolver.resolve([], all_files=True)
        else:
            discovered = self.discover(style_name, options)
            if discovered.failure:
                skipped_sources += 1
            resolved = self.resolver.resolve(discovered.value or [])
        skipped_sources += resolved.skipped_sources

        file_ids = resolved.file_ids
        if not file_ids:
            self.logger.warning("No image files found matching the criteria.")
            if skipped_sources:
                self.logger.warning(f"Bindings skipped due to errors: {skipped_sources}")
            return Result.success(None)

        files_to_process = options.apply_limit(file_ids)
        self.logger.info(
            f"Found {len(file_ids)} referenced image files. "
            f"Processing {len(files_to_process)} files in batches of {options.batch_size} "
            f'for style "{style_name}".'
        )

        stats = self.executor.execute(
            files_to_process,
            style,
            batch_size=options.batch_size,
            force=options.force,
        )
        stats.skipped_sources = skipped_sources
        if skipped_sources:
            self.logger.warning(f"Bindings skipped due to errors: {skipped_sources}")
        return Result.success(stats)

    def discover(self, style_name: str, options: GenerateOptions) -> Result[List[DisplayBinding]]:
        """Find and log the bindings that use a style, honouring the filters."""
        result = self.scanner.find_bindings(
            style_name,
            bundle=options.bundle,
            view_mode=options.view_mode,
            field=options.field,
        )
        bindings = result.value or []
        if not bindings:
            self.logger.warning(
                f'No display configurations found using image style "{style_name}".'
            )
            return result

        self.logger.info(
            f'Found {len(bindings)} display configurations using style "{style_name}":'
        )
        for binding in bindings:
            self.logger.info(f"  - {binding}")
        return result

    def show_usage(self, style_name: str) -> Result[List[UsageRow]]:
        """
        List the bindings that use a style with their entity counts.

        Returns:
            Result with usage rows, or a fatal failure for an unknown style
        """
        style_result = self.scanner.load_style(style_name)
        if not style_result.ok:
            self.logger.error(style_result.failure.message)
            return Result(failure=style_result.failure)

        bindings = self.scanner.find_bindings(style_name).value or []
        return Result.success(self.inspector.inspect(bindings))
