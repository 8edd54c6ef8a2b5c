"""
Command Line Interface for image derivative generation.
"""

import argparse
import logging
import sys
import urllib3
from typing import List, Optional

from .batch_executor import BatchExecutor
from .display_scanner import DisplayScanner
from .display_storage import DisplayStorage
from .drupal_db import DrupalDb
from .entity_storage import EntityStorage
from .exceptions import ConfigError
from .file_resolver import FileResolver
from .file_storage import FileStorage
from .generation_options import GenerateOptions
from .generation_progress import GenerationProgress
from .image_style_storage import ImageStyleStorage
from .image_toolkit import ImageToolkit
from .reporter import FORMATS, Reporter
from .site_config import SiteConfig
from .stream_wrappers import StreamWrappers
from .usage import UsageInspector
from .workflow import DerivativeWorkflow


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('mysql.connector').setLevel(logging.WARNING)

    return logging.getLogger('derivgen')


def get_site_config(args: argparse.Namespace) -> SiteConfig:
    """Get site configuration from INI file, environment and CLI overrides."""
    config = SiteConfig.load(getattr(args, 'site_config', None))

    if getattr(args, 'config_dir', None):
        config.config_dir = args.config_dir
    if getattr(args, 'public_path', None):
        config.public_path = args.public_path
    if getattr(args, 'private_path', None):
        config.private_path = args.private_path

    return config


def build_workflow(
    config: SiteConfig,
    logger: logging.Logger,
    progress: Optional[GenerationProgress] = None
) -> DerivativeWorkflow:
    """Wire the storages and services for one command invocation."""
    stream_wrappers = StreamWrappers.from_site_config(config, logger)
    toolkit = ImageToolkit(jpeg_quality=config.jpeg_quality, logger=logger)
    style_storage = ImageStyleStorage(config.config_dir, stream_wrappers, toolkit, logger)
    display_storage = DisplayStorage(config.config_dir, logger)

    db = DrupalDb(config.db, logger)
    entity_storage = EntityStorage(db, logger)
    file_storage = FileStorage(db, logger)

    return DerivativeWorkflow(
        scanner=DisplayScanner(display_storage, style_storage, logger),
        resolver=FileResolver(entity_storage, file_storage, logger),
        executor=BatchExecutor(file_storage, stream_wrappers, progress, logger),
        inspector=UsageInspector(entity_storage, logger),
        logger=logger,
    )


def load_config(args: argparse.Namespace, logger: logging.Logger) -> Optional[SiteConfig]:
    """Load and validate site configuration, logging every problem."""
    try:
        config = get_site_config(args)
    except ConfigError as e:
        logger.error(str(e))
        return None

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return None
    return config


def cmd_generate(args: argparse.Namespace) -> int:
    """Execute generate command."""
    logger = setup_logging(args.verbose)
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    config = load_config(args, logger)
    if config is None:
        return 1

    options = GenerateOptions(
        force=args.force,
        limit=args.limit,
        batch_size=args.batch_size,
        bundle=args.bundle,
        view_mode=args.view_mode,
        field=args.field,
        all_files=args.all_files,
    )

    logger.info(f"Config: {config.config_dir}")
    logger.info(f"Public files: {config.public_path}")
    if options.force:
        logger.info("Force mode: existing derivatives will be recreated")
    if options.limit:
        logger.info(f"Limit: {options.limit} files")

    try:
        progress = GenerationProgress(show_files=args.show_files, logger=logger)
        workflow = build_workflow(config, logger, progress)
        result = workflow.generate(args.style_name, options)

        if not result.ok:
            return 1

        stats = result.value
        if stats is None:
            return 0

        Reporter().report_generation(stats)
        return 0 if stats.failed == 0 else 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Generation failed: {e}")
        return 1


def cmd_show_usage(args: argparse.Namespace) -> int:
    """Execute show-usage command."""
    logger = setup_logging(args.verbose)

    config = load_config(args, logger)
    if config is None:
        return 1

    try:
        workflow = build_workflow(config, logger)
        result = workflow.show_usage(args.style_name)
        if not result.ok:
            return 1

        Reporter().report_usage(result.value, args.format)
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Show usage failed: {e}")
        return 1


def add_site_arguments(parser: argparse.ArgumentParser) -> None:
    """Add site configuration arguments to a parser."""
    site_group = parser.add_argument_group('Site')
    site_group.add_argument('--site-config', metavar='PATH',
                            help='INI file with [site], [database] and [s3] sections')
    site_group.add_argument('--config-dir', metavar='PATH',
                            help='Config sync directory (overrides DRUPAL_CONFIG_DIR)')
    site_group.add_argument('--public-path', metavar='PATH',
                            help='Directory behind public:// (overrides DRUPAL_PUBLIC_PATH)')
    site_group.add_argument('--private-path', metavar='PATH',
                            help='Directory behind private:// (overrides DRUPAL_PRIVATE_PATH)')


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='derivgen',
        description='Image style derivative generation for Drupal sites',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  derivgen generate advert_teaser
  derivgen generate thumbnail --bundle=advert --view-mode=teaser
  derivgen generate large --field=field_banner
  derivgen show-usage advert_teaser

Site settings come from --site-config, DRUPAL_* and S3_* environment
variables, and the path options below, in increasing priority.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Generate command
    gen_parser = subparsers.add_parser(
        'generate', aliases=['idg'],
        help='Generate image derivatives for images used in specific view modes'
    )
    gen_parser.add_argument('style_name', help='The machine name of the image style')
    gen_parser.add_argument('--force', action='store_true',
                            help='Force regeneration even if derivatives exist')
    gen_parser.add_argument('--limit', type=int, default=0, metavar='N',
                            help='Limit the number of files to process (default: no limit)')
    gen_parser.add_argument('--batch-size', type=int, default=20, metavar='N',
                            help='Number of files to process per batch, 1-50 (default: 20)')
    gen_parser.add_argument('--bundle', default='',
                            help='Limit to specific content type (e.g., article, advert)')
    gen_parser.add_argument('--view-mode', default='',
                            help='Limit to specific view mode (e.g., teaser, full)')
    gen_parser.add_argument('--field', default='',
                            help='Limit to specific image field (e.g., field_image)')
    gen_parser.add_argument('--all-files', action='store_true',
                            help='Process all image files instead of only referenced ones')
    gen_parser.add_argument('--show-files', action='store_true',
                            help='Print each file as processed with result')
    gen_parser.add_argument('-v', '--verbose', action='store_true', default=argparse.SUPPRESS,
                            help='Enable verbose logging')
    add_site_arguments(gen_parser)

    # Show usage command
    usage_parser = subparsers.add_parser(
        'show-usage', aliases=['idsu'],
        help='Show which display configurations use a specific image style'
    )
    usage_parser.add_argument('style_name', help='The machine name of the image style')
    usage_parser.add_argument('--format', choices=FORMATS, default='table',
                              help='Output format (default: table)')
    usage_parser.add_argument('-v', '--verbose', action='store_true', default=argparse.SUPPRESS,
                              help='Enable verbose logging')
    add_site_arguments(usage_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command in ('generate', 'idg'):
        return cmd_generate(parsed_args)
    elif parsed_args.command in ('show-usage', 'idsu'):
        return cmd_show_usage(parsed_args)

    return 1


if __name__ == '__main__':
    sys.exit(main())
