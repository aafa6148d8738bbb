"""Service layer for chezinstall."""

from .installer import InstallPlan, InstallService, scoped_tempdir

__all__ = ["InstallPlan", "InstallService", "scoped_tempdir"]
