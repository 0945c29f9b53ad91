"""transtree - keep the language trees of a translation project in sync."""

__version__ = "0.1.0"
