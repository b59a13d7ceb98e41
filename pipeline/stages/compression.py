"""
Compression Task
================

One task compresses one file with one codec and writes the artifact only when
it is strictly smaller than the source.
"""

import asyncio
import logging
import time
from concurrent.futures import Executor
from typing import Optional, Union

import aiofiles
import aiofiles.os

from base_classes import CandidateFile, CodecKind, CompressionOutcome
from pipeline_configs import BrotliConfig, CompressionConfig, GzipConfig
from pipeline_errors import CodecError, CompressionTaskError
from .codecs import encode
from .results import OutcomeCollector

logger = logging.getLogger(__name__)


class CompressionTask:
    """
    Compress a single file with a single codec.

    The task is a no-op (returns ``None``) when the codec is disabled, the
    file is gone or is not a regular file, the file is below the configured
    threshold, or the compressed output is not smaller than the input. Read,
    encode and write failures raise CompressionTaskError.
    """

    def __init__(self,
                 path: str,
                 codec: CodecKind,
                 config: CompressionConfig,
                 collector: OutcomeCollector,
                 executor: Optional[Executor] = None):
        self.path = path
        self.codec = codec
        self.config = config
        self.collector = collector
        self.executor = executor

    @property
    def output_path(self) -> str:
        return self.path + self.codec.suffix

    @property
    def codec_config(self) -> Union[GzipConfig, BrotliConfig]:
        if self.codec is CodecKind.GZIP:
            return self.config.gzip
        return self.config.brotli

    def __repr__(self) -> str:
        return f"CompressionTask({self.path!r}, {self.codec.value})"

    async def _stat(self) -> Optional[CandidateFile]:
        try:
            st = await aiofiles.os.stat(self.path)
        except OSError as e:
            logger.debug(f"Cannot stat {self.path}, skipping: {e}")
            return None
        return CandidateFile.from_stat(self.path, st)

    def _below_threshold(self, candidate: CandidateFile) -> bool:
        threshold = self.config.threshold
        return bool(threshold) and candidate.size < threshold

    async def run(self) -> Optional[CompressionOutcome]:
        codec_config = self.codec_config
        if not codec_config.enabled:
            return None

        start = time.perf_counter()
        candidate = await self._stat()
        if candidate is None or not candidate.is_regular:
            return None
        if self._below_threshold(candidate):
            logger.debug(f"{self.path} is below threshold ({candidate.size} bytes)")
            return None

        try:
            async with aiofiles.open(self.path, 'rb') as f:
                content = await f.read()
        except OSError as e:
            raise CompressionTaskError(self.path, self.codec.value, 'read', cause=e) from e

        loop = asyncio.get_running_loop()
        try:
            compressed = await loop.run_in_executor(
                self.executor, encode, self.codec, content, codec_config)
        except CodecError as e:
            raise CompressionTaskError(self.path, self.codec.value, 'compress', cause=e) from e

        if not candidate.size > len(compressed):
            logger.debug(f"{self.codec.value} output for {self.path} is not smaller "
                         f"({len(compressed)} >= {candidate.size} bytes), discarding")
            return None

        await self._write(compressed)

        outcome = CompressionOutcome(
            source_path=self.path,
            codec=self.codec,
            output_path=self.output_path,
            original_size=candidate.size,
            compressed_size=len(compressed),
            elapsed_ms=(time.perf_counter() - start) * 1000,
        )
        self.collector.add(outcome)
        return outcome

    async def _write(self, data: bytes) -> None:
        try:
            async with aiofiles.open(self.output_path, 'wb') as f:
                await f.write(data)
        except OSError as e:
            try:
                await aiofiles.os.remove(self.output_path)
            except OSError:
                logger.debug(f"No partial artifact to remove at {self.output_path}")
            raise CompressionTaskError(self.path, self.codec.value, 'write', cause=e) from e
