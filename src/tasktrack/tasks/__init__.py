"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskPatch, TaskFilters, TaskPage)
- validation.py: pure input checks run before any store access
- task_repository.py: SQLite row <-> Task mapping, filter/pagination queries
- task_service.py: the create/list/get/update/delete operations used by the API layer
"""
