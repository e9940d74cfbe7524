"""Concrete implementations of the external collaborator interfaces.

Available adapters:
- Local disk: adapters.filesystem.local.LocalFileSystem
- Preview only: adapters.filesystem.dry_run.DryRunFileSystem
"""
