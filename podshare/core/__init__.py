"""Core system components: config and error types."""

from podshare.core.config import Config
from podshare.core.errors import PodshareError

__all__ = [
    "Config",
    "PodshareError",
]
