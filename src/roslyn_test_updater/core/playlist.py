"""Writes a test playlist of the classes whose tests were updated."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

from roslyn_test_updater.utils.logging import LogEventNames

if TYPE_CHECKING:
    from roslyn_test_updater.interfaces.filesystem import FileSystem

log = structlog.get_logger()

PLAYLIST_FILE_NAME = "RoslynTestUpdater.playlist"


def render_playlist(class_names: Iterable[str]) -> str:
    """Render a Visual Studio test playlist matching any of the given classes.

    Args:
        class_names: Fully qualified class names, duplicates ignored

    Returns:
        The playlist XML document
    """
    root = ET.Element("Playlist", Version="2.0")
    rule = ET.SubElement(root, "Rule", Match="Any")
    for name in dict.fromkeys(class_names):
        ET.SubElement(rule, "Property", Name="Class", Value=name)
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="unicode") + "\n"


class PlaylistWriter:
    """Writes the playlist file into the current directory."""

    def __init__(self, fs: FileSystem, file_name: str = PLAYLIST_FILE_NAME) -> None:
        self._fs = fs
        self._file_name = file_name

    def write(self, class_names: Iterable[str]) -> str | None:
        """Write the playlist.

        Args:
            class_names: Fully qualified names of the touched classes

        Returns:
            Full path of the written playlist, or None if there was nothing to list
        """
        names = list(dict.fromkeys(class_names))
        if not names:
            log.info(LogEventNames.PLAYLIST_SKIPPED, reason="no_classes_touched")
            return None

        path = self._fs.get_full_path(self._file_name)
        with self._fs.create_text(path) as f:
            f.write(render_playlist(names))
        log.info(LogEventNames.PLAYLIST_WRITTEN, path=path, classes=len(names))
        return path
