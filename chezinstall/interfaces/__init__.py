"""User-facing interfaces for chezinstall."""
