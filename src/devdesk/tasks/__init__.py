"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Category, SortMode, Preferences)
- task_repository.py: in-memory task list persisted as a snapshot
- due_monitor.py: periodic due-soon / overdue alerts
- task_api.py: card helpers (due state, markdown with fallback)
"""
