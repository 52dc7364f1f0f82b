"""
Task subsystem.

Components:
- task_models.py: data structures (Action, Task, TaskStatus, TaskOutcome)
- task_handlers.py: command name -> handler registry and built-in handlers
- task_dispatcher.py: drains the State queue and dispatches each task
"""
