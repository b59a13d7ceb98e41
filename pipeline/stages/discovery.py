"""
File Discovery
==============

Produces the candidate file paths for a run, either by walking the build
output directory or by walking the bundle tree handed over by the build tool.
"""

import logging
import os
import re
from typing import Any, Iterator, Optional, Pattern

from pipeline_configs import CompressionConfig

logger = logging.getLogger(__name__)


def iter_output_directory(directory: str, pattern: Pattern[str]) -> Iterator[str]:
    """
    Recursively yield files under ``directory`` whose path matches ``pattern``.

    Subdirectories that cannot be listed are skipped along with everything
    below them.
    """
    for name in sorted(os.listdir(directory)):
        path = os.path.join(directory, name)
        if os.path.isdir(path):
            try:
                yield from iter_output_directory(path, pattern)
            except OSError as e:
                logger.debug(f"Skipping unreadable directory {path}: {e}")
                continue
        elif pattern.search(path):
            yield path


def iter_bundle_tree(bundle: Any, pattern: Pattern[str]) -> Iterator[str]:
    """Yield matching bundle file names, root first, then each child depth-first"""
    name = getattr(bundle, 'name', None)
    if name and pattern.search(name):
        yield name
    for child in getattr(bundle, 'child_bundles', None) or ():
        yield from iter_bundle_tree(child, pattern)


def discover_files(config: CompressionConfig,
                   bundle: Any = None,
                   out_dir: Optional[str] = None) -> Iterator[str]:
    """
    Select the traversal for ``config.compress_output`` and return its iterator.

    Args:
        config: Resolved run configuration
        bundle: Root bundle, walked when ``compress_output`` is off
        out_dir: Build output directory, walked when ``compress_output`` is on

    Returns:
        Lazy iterator of absolute file paths in discovery order
    """
    pattern = re.compile(config.test)
    if config.compress_output:
        if out_dir is None:
            raise ValueError("compress_output requires an output directory")
        return (os.path.abspath(p) for p in iter_output_directory(out_dir, pattern))
    if bundle is None:
        raise ValueError("bundle-tree discovery requires a root bundle")
    return (os.path.abspath(p) for p in iter_bundle_tree(bundle, pattern))
