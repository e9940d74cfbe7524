"""Core business logic components.

This module exports the main business logic classes:
- BaselineUpdater: Orchestrates a whole run
- LogParser: Extracts failed tests from test output
- BlockLocator: Finds the expected block in a test source file
- RewriteApplier: Applies replacements and writes files
- PlaylistWriter: Lists touched test classes for the test explorer
- LineReader: Line cursor used by the parser and the locator
"""

from roslyn_test_updater.core.block_locator import BlockLocator
from roslyn_test_updater.core.line_reader import Line, LineReader
from roslyn_test_updater.core.log_parser import LogParser, ParserState
from roslyn_test_updater.core.playlist import PlaylistWriter, render_playlist
from roslyn_test_updater.core.rewriter import RewriteApplier, apply_replacements
from roslyn_test_updater.core.updater import BaselineUpdater, RunContext, UpdateSummary

__all__ = [
    "BaselineUpdater",
    "BlockLocator",
    "Line",
    "LineReader",
    "LogParser",
    "ParserState",
    "PlaylistWriter",
    "RewriteApplier",
    "RunContext",
    "UpdateSummary",
    "apply_replacements",
    "render_playlist",
]
