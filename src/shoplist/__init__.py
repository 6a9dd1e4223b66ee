"""Shopping list state engine with undo and document-store sync."""

__version__ = "0.1.0"
