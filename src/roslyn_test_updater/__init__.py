"""Accept new diagnostic baselines from a failed xUnit run.

Reads the console output of a Roslyn test run, finds every failed
``VerifyDiagnostics``-style assertion and rewrites its expected diagnostics
in the test source to the diagnostics that were actually reported.
"""

from roslyn_test_updater._version import __version__

__all__ = ["__version__"]
