"""
Asset compression pipeline modules.
"""

# Import pipeline stages
from .stages.compression import CompressionTask
from .stages.discovery import discover_files
from .stages.formatting import ReportFormatter
from .stages.results import OutcomeCollector
from .workers.task_queue import TaskQueue

__all__ = [
    'CompressionTask',
    'discover_files',
    'ReportFormatter',
    'OutcomeCollector',
    'TaskQueue',
]
