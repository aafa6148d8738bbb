"""CLI interface for chezinstall.

This package is the home of the Click commands; ``cli`` is the console
script entry point.
"""

from .__main__ import cli
from .install import install

__all__ = ["cli", "install"]
