"""
DisplayScanner - Finds the display configurations that render a field with an image style.
"""

import logging
from typing import List, Optional

from .display import DisplayBinding
from .display_storage import DisplayStorage
from .exceptions import ConfigError
from .image_style import ImageStyle
from .image_style_storage import ImageStyleStorage
from .results import Result


class DisplayScanner:
    """
    Scans all entity view displays for image formatters using a style.

    Read-only; used by both generate and show-usage.
    """

    IMAGE_FORMATTERS = ('image', 'responsive_image')

    def __init__(
        self,
        display_storage: DisplayStorage,
        style_storage: ImageStyleStorage,
        logger: Optional[logging.Logger] = None
    ):
        self.displays = display_storage
        self.styles = style_storage
        self.logger = logger or logging.getLogger(__name__)

    def load_style(self, style_name: str) -> Result[ImageStyle]:
        """
        Resolve an image style by name.

        Returns:
            Result with the style, or a fatal failure if it does not exist
        """
        style = self.styles.load(style_name)
        if style is None:
            return Result.fatal(f'Image style "{style_name}" not found.', source=style_name)
        return Result.success(style)

    def find_bindings(
        self,
        style_name: str,
        bundle: str = '',
        view_mode: str = '',
        field: str = ''
    ) -> Result[List[DisplayBinding]]:
        """
        Find fields rendered with the given image style.

        Args:
            style_name: Image style machine name
            bundle: Only displays of this bundle ('' = any)
            view_mode: Only displays in this view mode ('' = any)
            field: Only this field ('' = any)

        Returns:
            Result with bindings in display enumeration order; a recoverable
            failure with an empty list if displays cannot be enumerated
        """
        bindings: List[DisplayBinding] = []
        try:
            for display in self.displays.load_all():
                if bundle and display.bundle != bundle:
                    continue
                if view_mode and display.mode != view_mode:
                    continue

                for field_name, component in display.get_components().items():
                    if field and field_name != field:
                        continue
                    if self.uses_style(component, style_name):
                        bindings.append(DisplayBinding(
                            entity_type=display.target_entity_type,
                            bundle=display.bundle,
                            view_mode=display.mode,
                            field_name=field_name,
                        ))
        except ConfigError as e:
            self.logger.error(f"Cannot enumerate display configurations: {e}")
            return Result.recoverable(str(e), source='entity_view_display', value=[])

        return Result.success(bindings)

    @classmethod
    def uses_style(cls, component: dict, style_name: str) -> bool:
        """True if a display component is an image formatter set to the style."""
        if component.get('type') not in cls.IMAGE_FORMATTERS:
            return False
        settings = component.get('settings') or {}
        return settings.get('image_style') == style_name
