"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Command) and their wire shape
- task_store.py: in-memory, lock-guarded pending task queue
- command_builder.py: ansible-playbook command assembly
"""
