"""
Pipeline Configurations for Asset Compression
=============================================

Typed configuration for a compression run, the layered merge that resolves it
(built-in defaults < discovered config < call-site overrides) and a few
pre-configured presets.
"""

import dataclasses
import logging
import re
import zlib
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from pipeline_errors import ConfigurationError

logger = logging.getLogger(__name__)


# Config files shared with JavaScript build tooling use camelCase keys
KEY_ALIASES = {
    'compressOutput': 'compress_output',
    'zlibLevel': 'zlib_level',
    'zlibMemLevel': 'zlib_mem_level',
    'nPostfix': 'npostfix',
    'nDirect': 'ndirect',
    'lgBlock': 'lgblock',
    'enableContextModeling': 'enable_context_modeling',
}

# Bound at module level: the GzipConfig.zlib field shadows the module in the class body
DEFAULT_ZLIB_LEVEL = zlib.Z_BEST_COMPRESSION
DEFAULT_ZLIB_MEM_LEVEL = 9


@dataclass(frozen=True)
class GzipConfig:
    """Settings for the gzip family encoder"""

    enabled: bool = True

    # Zopfli knobs, passed to the encoder verbatim
    numiterations: int = 15
    blocksplitting: bool = True
    blocksplittinglast: bool = False
    blocksplittingmax: int = 15

    # Fall back to plain DEFLATE
    zlib: bool = False
    zlib_level: int = DEFAULT_ZLIB_LEVEL
    zlib_mem_level: int = DEFAULT_ZLIB_MEM_LEVEL

    def __post_init__(self) -> None:
        if self.numiterations <= 0:
            raise ConfigurationError("gzip.numiterations must be positive")
        if self.blocksplittingmax < 0:
            raise ConfigurationError("gzip.blocksplittingmax cannot be negative")
        if not -1 <= self.zlib_level <= 9:
            raise ConfigurationError("gzip.zlib_level must be between -1 and 9")
        if not 1 <= self.zlib_mem_level <= 9:
            raise ConfigurationError("gzip.zlib_mem_level must be between 1 and 9")


@dataclass(frozen=True)
class BrotliConfig:
    """Settings for the Brotli encoder"""

    enabled: bool = True
    mode: int = 0  # 0 generic, 1 text, 2 font
    quality: int = 11
    lgwin: int = 24
    enable_context_modeling: bool = True

    # Advanced knobs, left out of the encoder parameters unless set
    lgblock: Optional[int] = None
    npostfix: Optional[int] = None
    ndirect: Optional[int] = None

    def __post_init__(self) -> None:
        if not 0 <= self.quality <= 11:
            raise ConfigurationError("brotli.quality must be between 0 and 11")
        if not 10 <= self.lgwin <= 24:
            raise ConfigurationError("brotli.lgwin must be between 10 and 24")


@dataclass(frozen=True)
class CompressionConfig:
    """Configuration resolved once per compression run"""

    test: str = '.'
    compress_output: bool = False
    threshold: Optional[int] = None
    concurrency: int = 2
    gzip: GzipConfig = field(default_factory=GzipConfig)
    brotli: BrotliConfig = field(default_factory=BrotliConfig)

    def __post_init__(self) -> None:
        if self.concurrency <= 0:
            raise ConfigurationError("concurrency must be positive")
        if self.threshold is not None and self.threshold < 0:
            raise ConfigurationError("threshold cannot be negative")
        try:
            re.compile(self.test)
        except re.error as e:
            raise ConfigurationError(f"Invalid test pattern: {self.test!r}", cause=e)

    @property
    def pattern(self) -> 're.Pattern[str]':
        return re.compile(self.test)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def _normalize_keys(values: Mapping[str, Any]) -> Dict[str, Any]:
    return {KEY_ALIASES.get(key, key): value for key, value in values.items()}


def _merge_section(base, overrides: Mapping[str, Any], section: str):
    known = {f.name for f in dataclasses.fields(base)}
    changes = {}
    for key, value in _normalize_keys(overrides).items():
        if key not in known:
            logger.warning(f"Ignoring unknown {section} option: {key}")
            continue
        changes[key] = value
    try:
        return dataclasses.replace(base, **changes)
    except TypeError as e:
        raise ConfigurationError(f"Invalid {section} options", cause=e)


def merge_config(base: CompressionConfig,
                 overrides: Optional[Mapping[str, Any]]) -> CompressionConfig:
    """
    Layer a mapping of options over a resolved configuration.

    Nested ``gzip`` and ``brotli`` sections are merged field by field, so a
    config file that only sets ``brotli.quality`` keeps every other Brotli
    default. ``None`` values in ``overrides`` leave the base value untouched.

    Args:
        base: Configuration to start from
        overrides: Options taking precedence over ``base``

    Returns:
        A new CompressionConfig
    """
    if not overrides:
        return base
    if not isinstance(overrides, Mapping):
        raise ConfigurationError(
            f"Configuration must be an object, got {type(overrides).__name__}")

    changes: Dict[str, Any] = {}
    nested: Dict[str, Any] = {}
    for key, value in _normalize_keys(overrides).items():
        if value is None:
            continue
        if key in ('gzip', 'brotli'):
            if not isinstance(value, Mapping):
                raise ConfigurationError(f"'{key}' options must be an object")
            nested[key] = value
        else:
            changes[key] = value

    merged = _merge_section(base, changes, 'compression')
    if 'gzip' in nested:
        merged = dataclasses.replace(
            merged, gzip=_merge_section(merged.gzip, nested['gzip'], 'gzip'))
    if 'brotli' in nested:
        merged = dataclasses.replace(
            merged, brotli=_merge_section(merged.brotli, nested['brotli'], 'brotli'))
    return merged


def resolve_config(discovered: Optional[Mapping[str, Any]] = None,
                   overrides: Optional[Mapping[str, Any]] = None,
                   base: Optional[CompressionConfig] = None) -> CompressionConfig:
    """Apply defaults < discovered config < call-site overrides"""
    config = base or CompressionConfig()
    config = merge_config(config, discovered)
    config = merge_config(config, overrides)
    logger.debug(f"Resolved compression config: {config}")
    return config


class ConfigPresets:
    """Pre-configured settings for common use cases"""

    @staticmethod
    def default() -> CompressionConfig:
        """Zopfli gzip and Brotli at maximum quality, two tasks at a time"""
        return CompressionConfig()

    @staticmethod
    def fast() -> CompressionConfig:
        """
        Optimized for quick local production builds
        - Plain DEFLATE instead of Zopfli
        - Mid-range Brotli quality
        """
        return CompressionConfig(
            concurrency=4,
            gzip=GzipConfig(zlib=True),
            brotli=BrotliConfig(quality=5, lgwin=22),
        )

    @staticmethod
    def maximum() -> CompressionConfig:
        """
        Optimized for smallest artifacts
        - More Zopfli iterations
        - Text mode Brotli
        """
        return CompressionConfig(
            gzip=GzipConfig(numiterations=50, blocksplittingmax=0),
            brotli=BrotliConfig(mode=1, quality=11, lgwin=24),
        )
