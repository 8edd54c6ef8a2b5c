"""
ImageStyleStorage - Loads image styles from image.style.*.yml config.
"""

import logging
from typing import Optional

from .config_storage import ConfigStorage
from .exceptions import ConfigError
from .image_effects import create_effect
from .image_style import ImageStyle
from .image_toolkit import ImageToolkit
from .stream_wrappers import StreamWrappers


class ImageStyleStorage:
    """
    Loads ImageStyle objects by machine name.
    """
    
    CONFIG_PREFIX = 'image.style'
    
    def __init__(
        self,
        config_dir: str,
        stream_wrappers: Optional[StreamWrappers] = None,
        toolkit: Optional[ImageToolkit] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.config = ConfigStorage(config_dir, self.CONFIG_PREFIX, self.logger)
        self.stream_wrappers = stream_wrappers
        self.toolkit = toolkit or ImageToolkit(logger=self.logger)
    
    def load(self, name: str) -> Optional[ImageStyle]:
        """
        Load an image style.
        
        Returns:
            The style, or None if no such style exists or its config is unreadable
        """
        try:
            data = self.config.read(name)
        except ConfigError as e:
            self.logger.warning(str(e))
            return None
        if data is None:
            return None
        
        effects_data = data.get('effects') or {}
        if isinstance(effects_data, dict):
            effects_data = list(effects_data.values())
        
        effects = []
        for effect_config in effects_data:
            if not isinstance(effect_config, dict):
                continue
            effect = create_effect(effect_config, self.logger)
            if effect is not None:
                effects.append(effect)
        
        return ImageStyle(
            name=data.get('name') or name,
            label=data.get('label', ''),
            effects=effects,
            stream_wrappers=self.stream_wrappers,
            toolkit=self.toolkit,
            logger=self.logger,
        )
