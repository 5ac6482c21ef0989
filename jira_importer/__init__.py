"""Excel -> Jira hierarchical issue importer."""

__version__ = "0.1.0"
