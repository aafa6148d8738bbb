"""Domain layer for chezinstall.

Pure models and rules with no I/O: platform naming, release asset layout and
the installer's exception hierarchy.
"""

from . import errors, models

__all__ = ["errors", "models"]
