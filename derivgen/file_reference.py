"""
FileReference - A managed file and where it lives.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FileReference:
    """
    A row of file_managed.
    
    Attributes:
        fid: File id
        uri: Stream wrapper URI, e.g. public://2024-01/photo.jpg
        filemime: Declared MIME type
        filename: Original file name
    """
    fid: int
    uri: str
    filemime: str = ''
    filename: str = ''
