"""TOML-based configuration provider.

Loads configuration from a local protostream.toml with global config fallback.

Config loading priority (highest to lowest):
1. Local: the file passed explicitly, or ./protostream.toml
2. Global: ~/.config/protostream/config.toml (user defaults)
3. Built-in defaults
"""

import logging
from pathlib import Path

from protostream.domain.config import ProtostreamConfig
from protostream.shared.config_io import (
    get_global_config_path,
    get_local_config_path,
    load_config_data,
)

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Implements config cascade:
    1. Load global config if present
    2. Load local config if present
    3. Local values override global values (logging per key, protocols
       per protocol name)
    4. Missing values fall back to built-in defaults

    Gracefully handles missing or invalid configs with warnings.
    """

    def load(self, local_path: Path | None = None) -> ProtostreamConfig:
        """Load configuration with global fallback.

        Args:
            local_path: Explicit local config file. Defaults to
                ./protostream.toml in the working directory.

        Returns:
            ProtostreamConfig with merged global/local values or defaults
        """
        local_path = local_path or get_local_config_path()
        global_path = get_global_config_path()

        config = ProtostreamConfig.default()

        if global_path.exists():
            try:
                global_data = load_config_data(global_path)
                config = ProtostreamConfig.from_partial(config, global_data)
                logger.debug("Loaded global config from %s", global_path)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to parse global config at %s: %s. Ignoring global config.",
                    global_path,
                    e,
                )

        if local_path.exists():
            try:
                local_data = load_config_data(local_path)
                config = ProtostreamConfig.from_partial(config, local_data)
                logger.debug("Loaded local config from %s", local_path)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to parse %s: %s. Using global/default configuration.",
                    local_path,
                    e,
                )

        return config
