from __future__ import annotations

import logging
import os
import shlex
import subprocess

logger = logging.getLogger(__name__)


def build_open_command(editor_command: str, folder_uri: str) -> list[str]:
    return [*shlex.split(editor_command), "--folder-uri", folder_uri]


def launch_editor(editor_command: str, folder_uri: str) -> None:
    """Open ``folder_uri`` in the editor and return without waiting.

    Launch failures are logged and dropped.
    """
    cmd = build_open_command(editor_command, folder_uri)
    try:
        subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
            env=os.environ.copy(),
        )
    except (OSError, ValueError) as exc:
        logger.warning("editor launch failed: %s", cmd, exc_info=exc)
