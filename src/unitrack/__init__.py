"""
unitrack: a personal task tracker for university assignments.

Packages:
- tasks/: domain model, store, queries, stats and the lifecycle controller
- storage/: durable key-value storage backends
- core/: ports (interfaces) and application state
- cli/ + connectors/: console presentation layer
"""

__version__ = "0.1.0"
