"""
Command Line Interface for the photo manifest build.
"""

import argparse
import logging
from typing import List, Optional

from .compressor import CompressionError
from .gallery_config import GalleryConfig
from .pipeline import PhotoPipeline
from .run_progress import RunProgress


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('photoprep')


def get_config(args: argparse.Namespace) -> GalleryConfig:
    """Get configuration from environment and CLI overrides."""
    config = GalleryConfig.from_env(package_json=args.package_json)

    if args.source_dir:
        config.source_dir = args.source_dir
    if args.published_dir:
        config.published_dir = args.published_dir
    if args.manifest:
        config.manifest_path = args.manifest
    if args.cache_file:
        config.cache_file = args.cache_file
    if args.env is not None:
        config.env = args.env
    if args.cdn:
        config.cdn = args.cdn
    if args.local_prefix:
        config.local_prefix = args.local_prefix
    if args.ignore:
        config.ignore_list = args.ignore
    if args.workers is not None:
        config.workers = args.workers
    if args.task_timeout is not None:
        config.task_timeout = args.task_timeout
    if args.quality is not None:
        config.quality = args.quality

    return config


def build_pipeline(
    args: argparse.Namespace,
    logger: logging.Logger,
    require_cdn: bool = True
) -> Optional[PhotoPipeline]:
    """Validate configuration and build the pipeline, or None if invalid."""
    config = get_config(args)
    errors = config.validate(require_cdn=require_cdn)
    if errors:
        for error in errors:
            logger.error(error)
        return None

    logger.info(f"Source: {config.source_dir}")
    logger.info(f"Published: {config.published_dir}")
    logger.info(f"Manifest: {config.manifest_path}")
    logger.info(f"Photo URLs: {config.src_prefix} ({'DEV' if config.is_dev else 'CDN'})")

    progress = RunProgress(show_files=not args.quiet, logger=logger)
    return PhotoPipeline(config, observer=progress, logger=logger)


def run_command(args: argparse.Namespace, step: str) -> int:
    """Run one pipeline step and map the outcome to an exit code."""
    logger = setup_logging(args.verbose)

    try:
        pipeline = build_pipeline(args, logger, require_cdn=(step != 'compress'))
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    if pipeline is None:
        return 1

    try:
        if step == 'compress':
            pipeline.sync_published()
        elif step == 'hash':
            pipeline.build_manifest()
        else:
            pipeline.run()
        logger.info(f"{step} finished")
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except CompressionError as e:
        logger.error(f"Compression failed: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Failed to process photos: {e}")
        return 1


def cmd_update(args: argparse.Namespace) -> int:
    """Execute update command (compress, then hash)."""
    return run_command(args, 'update')


def cmd_compress(args: argparse.Namespace) -> int:
    """Execute compress command."""
    return run_command(args, 'compress')


def cmd_hash(args: argparse.Namespace) -> int:
    """Execute hash command."""
    return run_command(args, 'hash')


def add_run_arguments(parser: argparse.ArgumentParser) -> None:
    """Add path and run settings arguments to a parser."""
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    parser.add_argument('-q', '--quiet', action='store_true', help='Suppress per-photo output')

    paths = parser.add_argument_group('Paths')
    paths.add_argument('--source-dir', metavar='PATH', help='Override PHOTOPREP_SOURCE_DIR')
    paths.add_argument('--published-dir', metavar='PATH', help='Override PHOTOPREP_PUBLISHED_DIR')
    paths.add_argument('--manifest', metavar='PATH', help='Override PHOTOPREP_MANIFEST')
    paths.add_argument('--cache-file', metavar='PATH', help='Override PHOTOPREP_CACHE_FILE')
    paths.add_argument('--package-json', default='package.json', metavar='PATH',
                       help='package.json holding config.cdn (default: package.json)')

    urls = parser.add_argument_group('Photo URLs')
    urls.add_argument('--env', help="Override NODE_ENV / PHOTOPREP_ENV ('DEV' uses local paths)")
    urls.add_argument('--cdn', help='Override PHOTOPREP_CDN')
    urls.add_argument('--local-prefix', help='Override PHOTOPREP_LOCAL_PREFIX')

    run = parser.add_argument_group('Processing')
    run.add_argument('--ignore', action='append', metavar='SUBSTRING',
                     help='Ignore filenames containing SUBSTRING (repeatable)')
    run.add_argument('-j', '--workers', type=int, metavar='N', help='Concurrent hash tasks')
    run.add_argument('--task-timeout', type=float, metavar='SECONDS',
                     help='Reject hash tasks still running after SECONDS and kill their workers')
    run.add_argument('--quality', type=int, help='JPEG quality for compressed photos (default: 80)')


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='photoprep',
        description='Photo manifest builder for the gallery',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Workflow:
  Update:   python -m photoprep update           (compress + hash)
  Compress: python -m photoprep compress         (sync published photos only)
  Hash:     python -m photoprep hash             (rebuild manifest only)

URLs:
  NODE_ENV=DEV emits local paths; otherwise set PHOTOPREP_CDN or config.cdn in package.json.
"""
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    update_parser = subparsers.add_parser('update', help='Sync published photos and rebuild the manifest')
    add_run_arguments(update_parser)

    compress_parser = subparsers.add_parser('compress', help='Delete stale and compress new published photos')
    add_run_arguments(compress_parser)

    hash_parser = subparsers.add_parser('hash', help='Hash published photos and write the manifest')
    add_run_arguments(hash_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'update':
        return cmd_update(parsed_args)
    elif parsed_args.command == 'compress':
        return cmd_compress(parsed_args)
    elif parsed_args.command == 'hash':
        return cmd_hash(parsed_args)

    return 1
