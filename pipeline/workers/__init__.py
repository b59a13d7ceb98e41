"""
Pipeline worker components for bounded concurrent processing.
"""

from .task_queue import TaskQueue

__all__ = [
    'TaskQueue',
]
