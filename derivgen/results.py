"""
Result - Explicit outcome objects for lookups that may fail.

Fatal failures abort the command; recoverable failures skip one source
(a display configuration, a binding, a file pass) and let the run continue.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


class ErrorKind(Enum):
    FATAL = 'fatal'
    RECOVERABLE = 'recoverable'


@dataclass(frozen=True)
class Failure:
    """
    A failed lookup.
    
    Attributes:
        kind: Whether the failure aborts the command
        message: Human-readable description
        source: What was being looked up (e.g. 'node.article.field_image')
    """
    kind: ErrorKind
    message: str
    source: str = ''
    
    @property
    def is_fatal(self) -> bool:
        return self.kind is ErrorKind.FATAL


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or a Failure."""
    value: Optional[T] = None
    failure: Optional[Failure] = None
    
    @property
    def ok(self) -> bool:
        return self.failure is None
    
    @classmethod
    def success(cls, value: T) -> 'Result[T]':
        return cls(value=value)
    
    @classmethod
    def fatal(cls, message: str, source: str = '') -> 'Result[T]':
        return cls(failure=Failure(ErrorKind.FATAL, message, source))
    
    @classmethod
    def recoverable(
        cls,
        message: str,
        source: str = '',
        value: Optional[T] = None
    ) -> 'Result[T]':
        """Recoverable failure, optionally carrying a fallback value."""
        return cls(value=value, failure=Failure(ErrorKind.RECOVERABLE, message, source))
