"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority) and date parsing
- storage.py: durable named records (JSON files / in-memory)
- task_store.py: observable store, single source of truth for tasks
- task_queries.py: list and calendar views over a snapshot
- reports.py: analytics over a snapshot
- task_api.py: small high-level helpers used by the rest of the app
"""
