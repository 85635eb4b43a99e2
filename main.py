#!/usr/bin/env python3
"""CLI entrypoint for the media file writer."""

from __future__ import annotations

from cli import parse_cli
from config import load_config
from core.run import run


def main() -> int:
    """Run the CLI entrypoint.

    Returns:
        Process exit code.
    """
    print("\nMedia File Writer (tag + rename)\n")
    _command, options = parse_cli()
    if options.manifest and not options.manifest.is_file():
        print(f"Not a file: {options.manifest}")
        return 2
    if options.rerun_failed and not options.rerun_failed.exists():
        print(f"Run manifest not found: {options.rerun_failed}")
        return 2

    if options.config_path:
        if not options.config_path.exists():
            print(f"Config path not found: {options.config_path}")
            return 2
        if options.config_path.is_dir():
            print(f"Config path must be a file: {options.config_path}")
            return 2

    cfg = load_config(options.config_path)
    return run(options, cfg)


if __name__ == "__main__":
    raise SystemExit(main())
