"""
Error Types for Asset Compression Pipeline
==========================================

Run-level and task-level failures raised by the pipeline. None of these are
retried: a configuration error aborts the whole run, everything else is
contained at the task boundary.
"""

import time
import traceback
from typing import Any, Dict, Optional


class PipelineError(Exception):
    """Base class for pipeline errors"""

    error_type = "pipeline"

    def __init__(self, message: str, cause: Optional[Exception] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize a pipeline error.

        Args:
            message: Error description
            cause: Original exception that caused this error
            details: Additional error context
        """
        super().__init__(message)
        self.cause = cause
        self.details = details or {}
        self.timestamp = time.time()
        self.traceback = traceback.format_exc() if cause else None

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.cause:
            return f"{base_msg} (caused by {type(self.cause).__name__}: {self.cause})"
        return base_msg

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(message={super().__str__()!r}, "
                f"cause={self.cause!r}, details={self.details!r})")

    def log_context(self) -> Dict[str, Any]:
        """Get error context for structured logging"""
        return {
            'error_type': self.error_type,
            'message': str(self),
            'timestamp': self.timestamp,
            'details': self.details,
            'cause': str(self.cause) if self.cause else None
        }


class ConfigurationError(PipelineError):
    """Configuration could not be found, parsed or resolved. Fatal to the run."""

    error_type = "configuration"


class CodecError(PipelineError):
    """An encoder rejected its input or parameters"""

    error_type = "codec"

    def __init__(self, codec: str, message: str, cause: Optional[Exception] = None):
        super().__init__(message, cause=cause, details={'codec': codec})
        self.codec = codec


class CompressionTaskError(PipelineError):
    """A single (file, codec) task failed while reading, encoding or writing"""

    error_type = "task"

    def __init__(self, path: str, codec: str, stage: str,
                 cause: Optional[Exception] = None):
        super().__init__(
            f"Failed to {stage} {path} for {codec}",
            cause=cause,
            details={'path': path, 'codec': codec, 'stage': stage},
        )
        self.path = path
        self.codec = codec
        self.stage = stage
