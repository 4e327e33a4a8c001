"""
Task subsystem.

Components:
- task_models.py: the Task record
- task_codec.py: JSON encode/decode of the whole list
- task_store.py: ordered in-memory list + persistence after every change
"""
