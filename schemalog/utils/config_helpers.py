from pathlib import Path
from typing import List, Optional, Union
from omegaconf import OmegaConf
from omegaconf.dictconfig import DictConfig


def merge_configs(
    config_paths: List[Union[str, Path]],
    overrides: Optional[List[str]] = None,
) -> DictConfig:
    """
    Merge multiple YAML configuration files with precedence, then apply dotted overrides.
    Later configs override earlier ones; overrides win over every file.

    Args:
        config_paths: List of paths to YAML config files. Later configs take precedence.
        overrides: Dotted ``key=value`` strings (e.g. ``sink.table=audit_logs``)

    Returns:
        DictConfig: Merged configuration object

    Raises:
        FileNotFoundError: If any config file doesn't exist

    Example:
        >>> config = merge_configs(["config/sink.yaml"], ["sink.table=audit_logs"])
        >>> config.sink.table
        'audit_logs'
    """
    if not config_paths:
        raise ValueError("config_paths is empty!")

    merged = OmegaConf.load(config_paths[0])

    for config_path in config_paths[1:]:
        config = OmegaConf.load(config_path)
        merged = OmegaConf.unsafe_merge(merged, config)

    if overrides:
        merged = OmegaConf.unsafe_merge(merged, OmegaConf.from_dotlist(list(overrides)))

    return merged
