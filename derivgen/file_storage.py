"""
FileStorage - Managed file lookups against file_managed.
"""

import logging
from typing import Dict, List, Optional, Sequence

from .drupal_db import DrupalDb, placeholders
from .file_reference import FileReference

IMAGE_MIMETYPES = (
    'image/jpeg',
    'image/jpg',
    'image/png',
    'image/gif',
    'image/webp',
)


class FileStorage:
    """
    Loads managed files by id, caching them until reset_cache().
    """
    
    def __init__(self, db: DrupalDb, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)
        self._cache: Dict[int, FileReference] = {}
    
    def query_image_file_ids(self, mimetypes: Sequence[str] = IMAGE_MIMETYPES) -> List[int]:
        """All file ids with an image MIME type, ascending."""
        sql = (
            f"SELECT fid FROM {self.db.table('file_managed')} "
            f"WHERE filemime IN ({placeholders(len(mimetypes))}) ORDER BY fid"
        )
        return [int(fid) for fid in self.db.fetch_column(sql, list(mimetypes))]
    
    def load_multiple(self, fids: Sequence[int]) -> List[FileReference]:
        """
        Load files in the order requested.
        
        Ids without a file_managed row are left out.
        """
        missing = [fid for fid in fids if fid not in self._cache]
        if missing:
            sql = (
                f"SELECT fid, uri, filemime, filename FROM {self.db.table('file_managed')} "
                f"WHERE fid IN ({placeholders(len(missing))})"
            )
            for fid, uri, filemime, filename in self.db.fetch_all(sql, missing):
                self._cache[int(fid)] = FileReference(
                    fid=int(fid),
                    uri=uri,
                    filemime=filemime or '',
                    filename=filename or '',
                )
        
        return [self._cache[fid] for fid in fids if fid in self._cache]
    
    def reset_cache(self, fids: Optional[Sequence[int]] = None) -> None:
        if fids is None:
            self._cache.clear()
            return
        for fid in fids:
            self._cache.pop(fid, None)
    
    def cached_count(self) -> int:
        return len(self._cache)
