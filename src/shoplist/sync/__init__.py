"""Synchronization with the remote document store."""
