"""
UsageInspector - Counts the entities behind each display binding.
"""

import logging
from dataclasses import dataclass, asdict
from typing import List, Optional, Sequence

from .display import DisplayBinding
from .entity_storage import EntityStorage
from .exceptions import StorageError


@dataclass
class UsageRow:
    """
    One display binding and how many entities populate its field.
    
    image_count is None when the count query failed.
    """
    entity_type: str
    bundle: str
    view_mode: str
    field_name: str
    image_count: Optional[int]
    
    def to_dict(self) -> dict:
        return asdict(self)


class UsageInspector:
    """
    Builds usage rows without loading any entities.
    """
    
    def __init__(self, entity_storage: EntityStorage, logger: Optional[logging.Logger] = None):
        self.entities = entity_storage
        self.logger = logger or logging.getLogger(__name__)
    
    def inspect(self, bindings: Sequence[DisplayBinding]) -> List[UsageRow]:
        rows = []
        for binding in bindings:
            try:
                count: Optional[int] = self.entities.count_with_field(
                    binding.entity_type, binding.bundle, binding.field_name
                )
            except StorageError as e:
                self.logger.warning(f"Cannot count entities for {binding}: {e}")
                count = None
            
            rows.append(UsageRow(
                entity_type=binding.entity_type,
                bundle=binding.bundle,
                view_mode=binding.view_mode,
                field_name=binding.field_name,
                image_count=count,
            ))
        return rows
