"""
EntityStorage - Queries entity field tables for image references.

Drupal stores configurable field values in {entity_type}__{field_name}
tables with one row per (entity_id, langcode, delta) and the referenced
file id in {field_name}_target_id.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .drupal_db import DrupalDb, check_identifier, placeholders


class EntityStorage:
    """
    Entity query and field loading over the site database.
    
    Loaded field values are cached per (entity_type, field_name) until
    reset_cache() releases them.
    """
    
    def __init__(self, db: DrupalDb, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)
        self._cache: Dict[Tuple[str, str], Dict[int, List[int]]] = {}
    
    def _field_table(self, entity_type: str, field_name: str) -> Tuple[str, str]:
        check_identifier(entity_type)
        column = f"`{check_identifier(field_name)}_target_id`"
        return self.db.table(f"{entity_type}__{field_name}"), column
    
    def query_ids_with_field(self, entity_type: str, bundle: str, field_name: str) -> List[int]:
        """
        Ids of entities of a bundle where the field is not empty.
        
        Raises:
            StorageNotFoundError: If the entity type or field has no table
            StorageError: On other database errors
        """
        table, column = self._field_table(entity_type, field_name)
        sql = (
            f"SELECT DISTINCT entity_id FROM {table} "
            f"WHERE bundle = %s AND deleted = 0 AND {column} IS NOT NULL "
            f"ORDER BY entity_id"
        )
        return [int(entity_id) for entity_id in self.db.fetch_column(sql, (bundle,))]
    
    def count_with_field(self, entity_type: str, bundle: str, field_name: str) -> int:
        """Number of entities of a bundle where the field is not empty."""
        table, column = self._field_table(entity_type, field_name)
        sql = (
            f"SELECT COUNT(DISTINCT entity_id) FROM {table} "
            f"WHERE bundle = %s AND deleted = 0 AND {column} IS NOT NULL"
        )
        rows = self.db.fetch_column(sql, (bundle,))
        return int(rows[0]) if rows else 0
    
    def load_field_targets(
        self,
        entity_type: str,
        field_name: str,
        entity_ids: Sequence[int]
    ) -> Dict[int, List[int]]:
        """
        Load referenced file ids per entity, in delta order.
        
        Args:
            entity_type: Entity type id
            field_name: Image field name
            entity_ids: Entities to load
            
        Returns:
            Dict mapping entity_id -> list of target ids
        """
        cache = self._cache.setdefault((entity_type, field_name), {})
        missing = [entity_id for entity_id in entity_ids if entity_id not in cache]
        
        if missing:
            table, column = self._field_table(entity_type, field_name)
            sql = (
                f"SELECT entity_id, {column} FROM {table} "
                f"WHERE entity_id IN ({placeholders(len(missing))}) AND deleted = 0 "
                f"ORDER BY entity_id, langcode, delta"
            )
            for entity_id in missing:
                cache[entity_id] = []
            for entity_id, target_id in self.db.fetch_all(sql, missing):
                if target_id:
                    cache[int(entity_id)].append(int(target_id))
        
        return {entity_id: cache[entity_id] for entity_id in entity_ids if entity_id in cache}
    
    def reset_cache(self, entity_type: str, entity_ids: Optional[Sequence[int]] = None) -> None:
        """Drop cached field values for some (or all) entities of a type."""
        for (cached_type, _), cache in self._cache.items():
            if cached_type != entity_type:
                continue
            if entity_ids is None:
                cache.clear()
            else:
                for entity_id in entity_ids:
                    cache.pop(entity_id, None)
    
    def cached_count(self) -> int:
        return sum(len(cache) for cache in self._cache.values())
