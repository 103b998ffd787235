"""
Command-line interface for repo-pdf-service.

``repo2pdf serve`` runs the HTTP service; ``repo2pdf render`` renders one
repository to a local PDF file.
"""

import argparse
import logging
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from repo_pdf_service import __version__
from repo_pdf_service.core.config import AppConfig
from repo_pdf_service.core.constants import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_FILE_SIZE,
    LOG_DATE_FORMAT,
    LOG_FORMAT,
)
from repo_pdf_service.core.exceptions import RepoPDFError


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure logging based on verbosity level.

    Args:
        verbose: Enable verbose (DEBUG) logging
        quiet: Enable quiet mode (WARNING+ only)
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # Suppress verbose output from third-party libraries
    if not verbose:
        logging.getLogger("urllib3").setLevel(logging.WARNING)


def _load_config(config_path: Optional[Path]) -> AppConfig:
    if config_path is not None:
        return AppConfig.from_yaml(config_path)
    return AppConfig.from_env()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo2pdf",
        description="Render GitHub repositories to PDF with syntax highlighting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the HTTP service
  repo2pdf serve --port 5000

  # Render JavaScript and Python files of a repository
  repo2pdf render https://github.com/octocat/Hello-World --ext js --ext py
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-c", "--config", type=Path, help="Path to configuration YAML file")
    verbosity = common.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output (DEBUG level)"
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only show warnings and errors"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", parents=[common], help="Run the HTTP service")
    serve.add_argument("--host", help="Interface to bind (overrides config)")
    serve.add_argument("--port", type=int, help="Port to listen on (overrides config)")

    render = subparsers.add_parser("render", parents=[common], help="Render one repository")
    render.add_argument("url", help="GitHub repository URL")
    render.add_argument("-o", "--output", type=Path, help="Output PDF path")
    render.add_argument(
        "--ext",
        dest="extensions",
        action="append",
        default=[],
        help="Include only files with this extension (repeatable)",
    )
    render.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH)
    render.add_argument("--max-file-size", type=int, default=DEFAULT_MAX_FILE_SIZE)
    render.add_argument("--no-readme", action="store_true", help="Omit the README section")
    render.add_argument(
        "--no-structure", action="store_true", help="Omit the repository structure section"
    )
    render.add_argument("--no-files", action="store_true", help="Omit file sections")

    return parser


def _serve(args: argparse.Namespace, config: AppConfig) -> int:
    from repo_pdf_service.service import run_service

    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port

    run_service(config, log_level="debug" if args.verbose else "info")
    return 0


def _render(args: argparse.Namespace, config: AppConfig) -> int:
    from repo_pdf_service.converter import RepoPDFConverter
    from repo_pdf_service.core.models import RenderOptions, RepoRef
    from repo_pdf_service.github import GitHubClient
    from repo_pdf_service.service.delivery import ArtifactScope

    logger = logging.getLogger(__name__)

    repo = RepoRef.from_url(args.url)
    options = RenderOptions(
        include_readme=not args.no_readme,
        include_structure=not args.no_structure,
        include_files=not args.no_files,
        file_extensions=args.extensions,
        max_depth=args.max_depth,
        max_file_size=args.max_file_size,
    )
    config.pdf_settings.show_progress = not args.quiet

    logger.info(f"🚀 Rendering {repo.owner}/{repo.repo}...")

    scope = ArtifactScope(config.workspace_path)
    try:
        with GitHubClient(config.github) as client:
            pdf_path = RepoPDFConverter(config, client).generate(repo, options, scope.path)

        output = args.output or Path.cwd() / pdf_path.name
        output.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(pdf_path), str(output))
    finally:
        scope.cleanup()

    logger.info(f"📄 Output: {output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = build_parser().parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet)
    logger = logging.getLogger(__name__)

    try:
        config = _load_config(args.config)
        if args.command == "serve":
            return _serve(args, config)
        return _render(args, config)

    except RepoPDFError as e:
        logger.error(f"❌ {e.message}")
        if e.details and args.verbose:
            logger.error(f"Details: {e.details}")
        return 1

    except KeyboardInterrupt:
        logger.warning("⚠️  Operation cancelled by user")
        return 130

    except Exception as e:
        logger.error(f"❌ Unexpected error: {e}")
        if args.verbose:
            logger.exception("Stack trace:")
        return 1


if __name__ == "__main__":
    sys.exit(main())
