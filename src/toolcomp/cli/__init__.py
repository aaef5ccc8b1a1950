"""Command-line interface for toolcomp.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- JSON and text path files in mm or inch
- G-code or JSON command output
- Dry-run summaries and verbose/quiet output modes
"""

from toolcomp.cli.app import cli, main

__all__ = ["cli", "main"]
