"""
Task subsystem.

Components:
- task_models.py: data structures (Task, HistoryEntry, Priority, TaskFilter)
- history_log.py: append-only completion/deletion log
- task_store.py: ordered task collection, mutations and derived views
- deadline_monitor.py: polling monitor that reminds about tasks due today
"""
