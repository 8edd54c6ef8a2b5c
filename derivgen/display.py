"""
EntityViewDisplay and DisplayBinding - Display configuration records.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class EntityViewDisplay:
    """
    How one bundle is rendered in one view mode.
    
    Attributes:
        id: Config id, e.g. 'node.article.teaser'
        target_entity_type: Entity type id, e.g. 'node'
        bundle: Bundle, e.g. 'article'
        mode: View mode, e.g. 'teaser'
        status: Whether the display is enabled
        content: Visible components keyed by field name
    """
    id: str
    target_entity_type: str
    bundle: str
    mode: str
    status: bool = True
    content: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    
    def get_components(self) -> Dict[str, Dict[str, Any]]:
        return self.content
    
    @classmethod
    def from_dict(cls, data: dict) -> 'EntityViewDisplay':
        """Create from a core.entity_view_display.*.yml mapping."""
        content = data.get('content') or {}
        return cls(
            id=data.get('id', ''),
            target_entity_type=data.get('targetEntityType', ''),
            bundle=data.get('bundle', ''),
            mode=data.get('mode', 'default'),
            status=bool(data.get('status', True)),
            content={
                name: component for name, component in content.items()
                if isinstance(component, dict)
            },
        )


@dataclass(frozen=True)
class DisplayBinding:
    """
    A field rendered with an image formatter using a given image style.
    """
    entity_type: str
    bundle: str
    view_mode: str
    field_name: str
    
    def __str__(self) -> str:
        return f"{self.entity_type}.{self.bundle}.{self.view_mode}: {self.field_name}"
