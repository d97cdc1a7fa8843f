"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority) and display helpers
- task_store.py: SQLite-backed storage, carry-over and import
"""
