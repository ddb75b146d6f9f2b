from .loader import find_config_file, load_config
from .models import (
    DEFAULT_IGNORE_RULES,
    AssetsConfig,
    DestinationConfig,
    FolderConfig,
    IgnoreRule,
    SanitizationRules,
    VaultpressConfig,
)

__all__ = [
    "DEFAULT_IGNORE_RULES",
    "AssetsConfig",
    "DestinationConfig",
    "FolderConfig",
    "IgnoreRule",
    "SanitizationRules",
    "VaultpressConfig",
    "find_config_file",
    "load_config",
]
