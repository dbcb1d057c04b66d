"""
Shared utility functions.
"""

from schemalog.utils.config_helpers import merge_configs

__all__ = [
    # Configuration utilities
    "merge_configs",
]
