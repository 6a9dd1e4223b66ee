"""Database access for the document store."""
