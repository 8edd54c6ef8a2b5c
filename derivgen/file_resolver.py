"""
FileResolver - Expands display bindings into the file ids to process.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .display import DisplayBinding
from .entity_storage import EntityStorage
from .exceptions import StorageError
from .file_storage import FileStorage
from .results import Failure, Result


@dataclass
class ResolvedFiles:
    """
    Outcome of file resolution.

    Attributes:
        file_ids: De-duplicated file ids in first-seen order
        failures: Recoverable failures (one per skipped binding or pass)
    """
    file_ids: List[int] = field(default_factory=list)
    failures: List[Failure] = field(default_factory=list)

    @property
    def skipped_sources(self) -> int:
        return len(self.failures)


class FileResolver:
    """
    Resolves file ids in one of two modes:

    - referenced: files referenced by entities matching the bindings
    - all files: every managed file with an image MIME type
    """

    def __init__(
        self,
        entity_storage: EntityStorage,
        file_storage: FileStorage,
        logger: Optional[logging.Logger] = None
    ):
        self.entities = entity_storage
        self.files = file_storage
        self.logger = logger or logging.getLogger(__name__)

    def resolve(
        self,
        bindings: Sequence[DisplayBinding],
        all_files: bool = False
    ) -> ResolvedFiles:
        """
        Resolve file ids.

        Args:
            bindings: Display bindings (ignored when all_files is set)
            all_files: Process every image file instead of referenced ones

        Returns:
            ResolvedFiles with ids and any recoverable failures
        """
        if all_files:
            result = self.resolve_all_images()
            return ResolvedFiles(
                file_ids=result.value or [],
                failures=[result.failure] if result.failure else [],
            )

        resolved = ResolvedFiles()
        seen = set()
        for binding in bindings:
            result = self.resolve_binding(binding)
            if result.failure:
                resolved.failures.append(result.failure)
            for fid in result.value or []:
                if fid not in seen:
                    seen.add(fid)
                    resolved.file_ids.append(fid)
        return resolved

    def resolve_binding(self, binding: DisplayBinding) -> Result[List[int]]:
        """File ids referenced through one binding, in entity/delta order."""
        try:
            entity_ids = self.entities.query_ids_with_field(
                binding.entity_type, binding.bundle, binding.field_name
            )
            if not entity_ids:
                return Result.success([])

            targets = self.entities.load_field_targets(
                binding.entity_type, binding.field_name, entity_ids
            )
            file_ids = [
                target_id
                for entity_id in entity_ids
                for target_id in targets.get(entity_id, [])
                if target_id
            ]
            self.entities.reset_cache(binding.entity_type, entity_ids)
        except StorageError as e:
            self.logger.error(f"Skipping {binding}: {e}")
            return Result.recoverable(str(e), source=str(binding), value=[])

        self.logger.debug(
            f"{binding}: {len(entity_ids)} entities, {len(file_ids)} file references"
        )
        return Result.success(file_ids)

    def resolve_all_images(self) -> Result[List[int]]:
        """Every managed image file id, ascending."""
        try:
            return Result.success(self.files.query_image_file_ids())
        except StorageError as e:
            self.logger.error(f"Cannot list image files: {e}")
            return Result.recoverable(str(e), source='file_managed', value=[])
