"""Application wiring for chezinstall: configuration loading."""

from .config import InstallerConfig, build_config, load_config

__all__ = ["InstallerConfig", "build_config", "load_config"]
