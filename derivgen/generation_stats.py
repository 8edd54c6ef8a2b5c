"""
GenerationStats - Counters for a derivative generation run.
"""

import time
from dataclasses import dataclass, field
from typing import List


@dataclass
class GenerationStats:
    """
    Statistics for a generation run.
    
    Attributes:
        total_to_process: Files handed to the batch executor
        processed: Files handled (success + failed + skipped)
        success: Derivatives created
        failed: Derivatives that could not be created
        skipped: Derivatives that already existed
        start_time: Start timestamp
        error_details: Error messages for failed files
        skipped_sources: Bindings or passes skipped because of lookup errors
    """
    total_to_process: int = 0
    processed: int = 0
    success: int = 0
    failed: int = 0
    skipped: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)
    skipped_sources: int = 0
    
    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time
    
    @property
    def rate_per_second(self) -> float:
        """Processing rate in files per second."""
        if self.elapsed_seconds > 0:
            return self.processed / self.elapsed_seconds
        return 0.0
    
    @property
    def rate_per_minute(self) -> float:
        """Processing rate in files per minute."""
        return self.rate_per_second * 60
    
    @property
    def percent_complete(self) -> float:
        """Share of files processed, rounded to one decimal."""
        if self.total_to_process <= 0:
            return 100.0
        return round(self.processed / self.total_to_process * 100, 1)
    
    @property
    def remaining_count(self) -> int:
        """Remaining to process."""
        return self.total_to_process - self.processed
    
    def record_success(self) -> None:
        self.processed += 1
        self.success += 1
    
    def record_skip(self) -> None:
        self.processed += 1
        self.skipped += 1
    
    def record_failure(self, message: str = '') -> None:
        self.processed += 1
        self.failed += 1
        if message:
            self.error_details.append(message)
    
    def to_dict(self) -> dict:
        return {
            'processed': self.processed,
            'success': self.success,
            'failed': self.failed,
            'skipped': self.skipped,
        }
