"""Durable key-value storage used by the task store."""
