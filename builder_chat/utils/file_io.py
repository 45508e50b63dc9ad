# builder_chat/utils/file_io.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — file_io utilities
---------------------------------------
Helpers for the small JSON documents the session store keeps on disk.

- read_json: strict read, the caller decides what a failure means.
- write_json_atomic: temp file + rename, so readers never see half a file.
- remove_file: delete if present.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def read_json(path: Path) -> Optional[Any]:
    """
    Read and parse a JSON file.

    Returns None when the file does not exist. Read errors (OSError) and
    invalid JSON (json.JSONDecodeError) are logged and re-raised.
    """
    if not path.is_file():
        return None

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("read_json: failed to read %s: %s", path, exc)
        raise

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error("read_json: invalid JSON in %s: %s", path, exc)
        raise


def write_json_atomic(path: Path, data: Dict[str, Any]) -> None:
    """
    Write JSON to disk atomically:

    - ensures the parent directory exists
    - writes to a temporary file next to the target
    - renames the temporary file over the target

    Any failure is logged and re-raised.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("write_json_atomic: failed to create dir %s: %s", path.parent, exc)
        raise

    tmp_path = path.with_suffix(path.suffix + ".tmp")

    try:
        json_text = json.dumps(data, ensure_ascii=False, indent=2)
        tmp_path.write_text(json_text, encoding="utf-8")
        tmp_path.replace(path)
    except OSError as exc:
        logger.error("write_json_atomic: failed to write %s: %s", path, exc)
        raise


def remove_file(path: Path) -> bool:
    """Delete `path` if it exists. Returns True when a file was removed."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.error("remove_file: failed to delete %s: %s", path, exc)
        raise
    return True
