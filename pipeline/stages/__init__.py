"""
Pipeline stages for the asset compression system.
"""

from .codecs import BrotliParameters, encode
from .compression import CompressionTask
from .discovery import discover_files, iter_bundle_tree, iter_output_directory
from .formatting import ReportFormatter, ReportRow
from .results import OutcomeCollector

__all__ = [
    'BrotliParameters',
    'encode',
    'CompressionTask',
    'discover_files',
    'iter_bundle_tree',
    'iter_output_directory',
    'ReportFormatter',
    'ReportRow',
    'OutcomeCollector',
]
