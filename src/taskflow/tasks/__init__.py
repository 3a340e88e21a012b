"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, partition names)
- ordering.py: display-order decisions for new and restored tasks
- validation.py: title normalization/validation
- task_store.py: SQLite-backed and in-memory partition stores
- task_repository.py: active/deleted partitions, soft-delete/restore/purge
- views.py: small read-side helpers used by the front end
"""
