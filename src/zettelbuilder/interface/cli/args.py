from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface: global options, the build/serve/tree/
dump-config commands and their flags. Provides logic to translate parsed
arguments into project configuration overrides.
"""

import argparse
from typing import Any, Dict

COMMANDS = ("build", "serve", "tree", "dump-config")

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the zettelbuilder CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="zettelbuilder",
        description="Build and serve a static site from a directory of notes.",
    )

    # --- Global options ---
    p.add_argument(
        "-c", "--config",
        dest="config_path",
        default=None,
        help="Project file (default: ./zettelbuilder.json).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- build ---
    build = sub.add_parser("build", help="Build the site once.")
    _add_source_options(build)
    _add_output_options(build)
    build.add_argument(
        "--print-tree",
        action="store_true",
        help="Log the note folder tree after building.",
    )

    # --- serve ---
    serve = sub.add_parser("serve", help="Build, serve and rebuild on changes.")
    _add_source_options(serve)
    _add_output_options(serve)
    serve.add_argument(
        "-p", "--port",
        type=int,
        default=None,
        help="Port to listen on (default: first free port in 3000-3999).",
    )

    # --- tree ---
    tree = sub.add_parser("tree", help="Print the notes grouped by folder.")
    _add_source_options(tree)

    # --- dump-config ---
    sub.add_parser("dump-config", help="Print the effective configuration as JSON.")

    return p


def _add_source_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-s", "--src",
        dest="src_dir",
        default=None,
        help="Directory containing the notes.",
    )
    p.add_argument(
        "-t", "--theme",
        default=None,
        help="Theme name or import spec 'package.module[:attribute]'.",
    )


def _add_output_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-o", "--out",
        dest="build_dir",
        default=None,
        help="Output directory for the site.",
    )

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only options given on the command line are returned; options a command
    does not define are skipped.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    for key in ("src_dir", "build_dir", "theme", "port"):
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value

    if args.debug:
        overrides["log_level"] = "DEBUG"

    return overrides
