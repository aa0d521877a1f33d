"""rememberme — relationship garden layout and contact deduplication."""

__version__ = "0.1.0"
