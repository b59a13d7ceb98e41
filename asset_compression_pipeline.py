"""
Asset Compression Pipeline
==========================

Post-build step that writes gzip (``.gz``) and Brotli (``.br``) siblings next
to build output files, keeping each artifact only when it is smaller than its
source, and prints a sorted summary of what was written.
"""

import logging
import os
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, TextIO, Union

from tqdm import tqdm

from base_classes import CodecKind, CompressionOutcome
from config_discovery import load_config
from pipeline.stages.compression import CompressionTask
from pipeline.stages.discovery import discover_files
from pipeline.stages.formatting import ReportFormatter
from pipeline.stages.results import OutcomeCollector
from pipeline.workers.task_queue import TaskQueue
from pipeline_configs import CompressionConfig, merge_config

logger = logging.getLogger(__name__)

PRODUCTION_ENV_VAR = 'NODE_ENV'
CODEC_ORDER = (CodecKind.GZIP, CodecKind.BROTLI)


def is_production(environ: Optional[Mapping[str, str]] = None) -> bool:
    """True when the build was started in production mode"""
    environ = os.environ if environ is None else environ
    return environ.get(PRODUCTION_ENV_VAR) == 'production'


@dataclass
class RunResult:
    """Everything a finished run produced"""
    outcomes: List[CompressionOutcome]
    candidates: int
    tasks_submitted: int
    elapsed_seconds: float
    failures: List[BaseException] = field(default_factory=list)
    report: str = ''

    @property
    def bytes_saved(self) -> int:
        return sum(o.original_size - o.compressed_size for o in self.outcomes)


class AssetCompressionPipeline:
    """Main orchestrator: configuration, discovery, scheduling and reporting"""

    def __init__(self,
                 config: Optional[CompressionConfig] = None,
                 config_path: Union[str, os.PathLike, None] = None,
                 search_from: Union[str, os.PathLike, None] = None,
                 overrides: Optional[Dict[str, Any]] = None,
                 show_progress: bool = False,
                 stream: Optional[TextIO] = None,
                 base_dir: Optional[str] = None):
        """
        Args:
            config: Pre-resolved configuration; skips config file discovery
            config_path: Explicit config file to load
            search_from: Directory to start the config file search from
            overrides: Options layered over the discovered configuration
            show_progress: Show a progress bar while tasks run
            stream: Report sink (defaults to stdout)
            base_dir: Paths in the report are shown relative to this directory
        """
        self.config = config
        self.config_path = config_path
        self.search_from = search_from
        self.overrides = overrides
        self.show_progress = show_progress
        self.stream = stream
        self.formatter = ReportFormatter(base_dir=base_dir)

    def resolve_config(self) -> CompressionConfig:
        """Resolve the run configuration; raises ConfigurationError on failure"""
        if self.config is not None:
            return merge_config(self.config, self.overrides)
        return load_config(self.config_path, self.search_from, self.overrides)

    @staticmethod
    def _output_dir(bundle: Any, out_dir: Optional[str]) -> Optional[str]:
        if out_dir is not None:
            return out_dir
        out_dir = getattr(bundle, 'out_dir', None)
        if out_dir is None and getattr(bundle, 'name', None):
            out_dir = os.path.dirname(bundle.name) or os.curdir
        return out_dir

    async def run(self, bundle: Any = None, out_dir: Optional[str] = None) -> RunResult:
        """
        Compress every candidate file with both codecs and print the report.

        Args:
            bundle: Root bundle of the build, walked in bundle-tree mode
            out_dir: Build output directory, walked in directory mode

        Returns:
            RunResult for the finished run

        Raises:
            ConfigurationError: if the configuration cannot be resolved
        """
        start = time.perf_counter()
        config = self.resolve_config()

        # Stage 1: Discovery
        logger.info("Stage 1: Discovering files...")
        # a bundle tree may name the same file more than once
        files = list(dict.fromkeys(discover_files(
            config, bundle=bundle, out_dir=self._output_dir(bundle, out_dir))))
        logger.info(f"Found {len(files)} files to compress")

        # Stage 2: Compression
        logger.info(f"Stage 2: Compressing with concurrency={config.concurrency}...")
        collector = OutcomeCollector()
        progress_bar = tqdm(
            total=len(files) * len(CODEC_ORDER),
            desc="Compressing files",
            unit="tasks",
            disable=not self.show_progress,
        )
        try:
            with TaskQueue(config.concurrency,
                           on_settled=lambda _result: progress_bar.update(1)) as queue:
                for path in files:
                    for codec in CODEC_ORDER:
                        task = CompressionTask(path, codec, config, collector,
                                               executor=queue.executor)
                        queue.submit(task.run, label=repr(task))
                await queue.on_idle()
                tasks_submitted = queue.submitted
                failures = list(queue.failures)
        finally:
            progress_bar.close()

        if failures:
            logger.warning(f"{len(failures)} of {tasks_submitted} compression tasks failed")

        # Stage 3: Report
        elapsed = time.perf_counter() - start
        outcomes = self.formatter.sort_outcomes(collector.outcomes())
        result = RunResult(
            outcomes=outcomes,
            candidates=len(files),
            tasks_submitted=tasks_submitted,
            elapsed_seconds=elapsed,
            failures=failures,
        )
        result.report = self.formatter.print_report(outcomes, elapsed, stream=self.stream)
        logger.info(f"Wrote {len(outcomes)} compressed files, saved {result.bytes_saved:,} bytes")
        return result

    async def on_bundled(self,
                         bundle: Any,
                         out_dir: Optional[str] = None,
                         production: Optional[bool] = None) -> Optional[RunResult]:
        """
        Build-completion hook.

        Runs only for production builds. Any error that escapes the run, such
        as an invalid configuration, is reported once and no report is printed.
        """
        if production is None:
            production = is_production()
        if not production:
            logger.debug("Not a production build, skipping compression")
            return None

        stream = self.stream or sys.stdout
        stream.write("\n🗜️  Compressing bundled files...\n\n")
        try:
            return await self.run(bundle=bundle, out_dir=out_dir)
        except Exception as e:
            logger.error(f"Compression error: {e}", exc_info=True)
            print(f"❌  Compression error:\n{e}", file=sys.stderr)
            return None
