"""Release notes resolution and caching for package-based installers."""

__version__ = "0.1.0"
