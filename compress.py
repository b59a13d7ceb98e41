#!/usr/bin/env python3
"""
Command line wrapper for the asset compression pipeline.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from asset_compression_pipeline import AssetCompressionPipeline
from pipeline_errors import ConfigurationError


def setup_logging(verbosity: int = 0) -> None:
    """Configure root logging; quiet unless -v is given"""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Write gzip and Brotli siblings for build output files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  compress.py                        # Compress everything under ./dist
  compress.py build                  # Compress ./build
  compress.py --test '\\.(js|css)$'   # Only scripts and stylesheets
  compress.py --threshold 1024 dist  # Skip files under 1 KiB
  compress.py --zlib --concurrency 8 # Faster gzip, more parallel tasks
        """
    )

    parser.add_argument('path', nargs='?', default='dist',
                        help='Build output directory (default: dist)')
    parser.add_argument('--config', type=str,
                        help='Config file to use instead of searching for one')
    parser.add_argument('--test', type=str,
                        help='Regular expression a file path must match')
    parser.add_argument('--threshold', type=int,
                        help='Minimum file size in bytes to compress')
    parser.add_argument('--concurrency', type=int,
                        help='Maximum number of files compressed at once')

    codec_group = parser.add_argument_group('codecs')
    codec_group.add_argument('--no-gzip', action='store_true',
                             help='Do not write .gz files')
    codec_group.add_argument('--no-brotli', action='store_true',
                             help='Do not write .br files')
    codec_group.add_argument('--zlib', action='store_true',
                             help='Use zlib DEFLATE instead of Zopfli for .gz files')

    parser.add_argument('--no-progress', action='store_true',
                        help='Hide the progress bar')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase log output (-vv for debug)')

    return parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate command line flags into config overrides"""
    overrides: Dict[str, Any] = {
        'compress_output': True,
        'test': args.test,
        'threshold': args.threshold,
        'concurrency': args.concurrency,
    }
    gzip: Dict[str, Any] = {}
    if args.no_gzip:
        gzip['enabled'] = False
    if args.zlib:
        gzip['zlib'] = True
    if gzip:
        overrides['gzip'] = gzip
    if args.no_brotli:
        overrides['brotli'] = {'enabled': False}
    return overrides


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    output_dir = Path(args.path).resolve()
    if not output_dir.is_dir():
        print(f"❌ Error: output directory not found: {output_dir}", file=sys.stderr)
        return 1

    pipeline = AssetCompressionPipeline(
        config_path=args.config,
        overrides=build_overrides(args),
        show_progress=not args.no_progress and sys.stderr.isatty(),
        base_dir=str(output_dir),
    )

    print(f"🗜️  Compressing: {output_dir}")

    try:
        result = await pipeline.run(out_dir=str(output_dir))
    except ConfigurationError as e:
        print(f"\n❌ Configuration error: {e}", file=sys.stderr)
        return 1

    if result.failures:
        print(f"⚠️  {len(result.failures)} of {result.tasks_submitted} tasks failed, "
              f"see log output for details", file=sys.stderr)
    return 0


def run() -> None:
    """Console script entry point"""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    run()
