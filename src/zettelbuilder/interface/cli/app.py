from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: loading and merging configuration sources
(defaults, project file and CLI overrides), logging initialization, command
dispatch and mapping of failures to process exit codes.
"""

import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from zettelbuilder.core.analysis.assembler import assemble_notes
from zettelbuilder.core.analysis.discovery import find_note_files
from zettelbuilder.core.analysis.folder_tree import build_note_tree, count_notes
from zettelbuilder.core.analysis.tree_renderer import format_note_tree
from zettelbuilder.core.build.orchestrator import BuildOrchestrator
from zettelbuilder.core.server.dev_server import DevServer
from zettelbuilder.core.services.project_loader import create_project
from zettelbuilder.core.services.validator import validate_config
from zettelbuilder.domain.config import load_project_file
from zettelbuilder.domain.errors import PathNotFound, ThemeLoadError, ZettelbuilderError
from zettelbuilder.domain.project_models import Project
from zettelbuilder.infra.logging import LoggingConfig, configure_logging, get_logger, shutdown_logging
from zettelbuilder.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 ok, 1 build/serve failure, 2 invalid
             configuration or path, 130 interrupted).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Resolve configuration (defaults < project file < CLI)
    try:
        base_conf = load_project_file(args.config_path)
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_INVALID

    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)

    # 3. Logging bootstrap
    configure_logging(LoggingConfig.from_project(clean_conf))

    for w in warnings:
        logger.warning(f"Configuration: {w}")

    if args.command == "dump-config":
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    # 4. Command execution phase
    try:
        project = create_project(clean_conf)

        if args.command == "tree":
            return _run_tree(project)
        if args.command == "build":
            return _run_build(project, print_tree=bool(args.print_tree))
        if args.command == "serve":
            return _run_serve(project, clean_conf)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return EXIT_INTERRUPTED
    except (PathNotFound, ThemeLoadError) as e:
        logger.error(str(e))
        return EXIT_INVALID
    except ZettelbuilderError as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except Exception as e:
        logger.critical(f"Unexpected failure: {e}", exc_info=True)
        return EXIT_FAILURE
    finally:
        shutdown_logging()

    parser.error(f"unknown command {args.command!r}")
    return EXIT_INVALID

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def _run_tree(project: Project) -> int:
    files = find_note_files(project.src_dir)
    notes = assemble_notes(files, project.src_dir, project.note_types)
    tree = build_note_tree(notes)
    print(format_note_tree(tree, root_label=project.src_dir))
    print(f"\n{count_notes(tree)} notes, {len(files)} files")
    return EXIT_OK


def _run_build(project: Project, *, print_tree: bool = False) -> int:
    orchestrator = BuildOrchestrator(project)
    result = asyncio.run(orchestrator.build())

    if print_tree:
        logger.info("Notes by folder:\n" + format_note_tree(result.analysis.tree))

    print(f"Built {len(result.pages)} pages into {result.build_dir}")
    return EXIT_OK


def _run_serve(project: Project, cfg: Dict[str, Any]) -> int:
    server = DevServer(
        project,
        port=cfg["port"],
        warmup_ms=cfg["warmup_ms"],
        cooldown_ms=cfg["cooldown_ms"],
    )
    asyncio.run(server.run())
    return EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge override values into the base configuration.

    Only known keys with a non-None value are merged.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    keys_to_merge = ["src_dir", "build_dir", "theme", "port", "log_level"]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out


if __name__ == "__main__":
    sys.exit(main())
