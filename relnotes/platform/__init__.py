"""Platform abstraction layer."""

from .files import atomic_write_text, scoped_temp_dir
from .paths import (
    home,
    user_cache_dir,
    user_config_dir,
)

__all__ = [
    # files
    "atomic_write_text",
    "scoped_temp_dir",
    # paths
    "home",
    "user_cache_dir",
    "user_config_dir",
]
