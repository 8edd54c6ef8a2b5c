"""
DisplayStorage - Loads entity view displays from core.entity_view_display.*.yml.
"""

import logging
from typing import Iterator, Optional

from .config_storage import ConfigStorage
from .display import EntityViewDisplay


class DisplayStorage:
    """
    Enumerates every entity view display in a config export.
    """
    
    CONFIG_PREFIX = 'core.entity_view_display'
    
    def __init__(self, config_dir: str, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.config = ConfigStorage(config_dir, self.CONFIG_PREFIX, self.logger)
    
    def load_all(self) -> Iterator[EntityViewDisplay]:
        """
        Yield all displays in config id order.
        
        Raises:
            ConfigError: If the config directory cannot be read
        """
        for config_id, data in self.config.read_all():
            display = EntityViewDisplay.from_dict(data)
            if not display.id:
                display.id = config_id
            # Fall back to the id: {entity_type}.{bundle}.{mode}
            parts = config_id.split('.')
            if len(parts) == 3:
                display.target_entity_type = display.target_entity_type or parts[0]
                display.bundle = display.bundle or parts[1]
                if not data.get('mode'):
                    display.mode = parts[2]
            yield display
