"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, FilterMode, TaskFields, TaskPatch)
- task_store.py: ordered in-memory sequence + persistence round-trip
- task_query.py: filtered views and due-date derived status
- task_stats.py: summary counts
- task_controller.py: the only component that mutates the store
"""
