"""
Base Classes for Asset Compression Pipeline
===========================================

Contains core data structures and abstract base classes used throughout the pipeline.
"""

import os
import stat as stat_module
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class CodecKind(Enum):
    """Compression codecs produced for every candidate file"""
    GZIP = "gzip"
    BROTLI = "brotli"

    @property
    def suffix(self) -> str:
        return ".gz" if self is CodecKind.GZIP else ".br"


@dataclass(frozen=True)
class CandidateFile:
    """Stat snapshot of a file taken right before it is compressed"""
    path: str
    size: int
    last_modified: float
    is_regular: bool

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> "CandidateFile":
        return cls(
            path=path,
            size=st.st_size,
            last_modified=st.st_mtime,
            is_regular=stat_module.S_ISREG(st.st_mode),
        )


@dataclass(frozen=True)
class CompressionOutcome:
    """Result of one (file, codec) attempt whose artifact was written"""
    source_path: str
    codec: CodecKind
    output_path: str
    original_size: int
    compressed_size: int
    elapsed_ms: float
    kept: bool = True

    @property
    def ratio(self) -> float:
        if not self.original_size:
            return 0.0
        return self.compressed_size / self.original_size


@dataclass
class BundleNode:
    """
    Minimal bundle tree node.

    Discovery only needs ``name`` and ``child_bundles``, so any object from a
    host build tool that exposes those two attributes can be passed instead.
    """
    name: Optional[str] = None
    child_bundles: List["BundleNode"] = field(default_factory=list)
    out_dir: Optional[str] = None


class Codec(ABC):
    """Abstract base class for bytes-in/bytes-out compression adapters"""

    kind: CodecKind

    @abstractmethod
    def encode(self, data: bytes, config: Any) -> bytes:
        pass
