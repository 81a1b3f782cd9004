"""
Module: common.file_locking

Purpose:
    Cross-platform file locking for the shared exam history log, so that
    concurrent builds can append without interleaving lines.
    Uses portalocker for Mac, Windows, and Linux compatibility.

Key Functions:
    - locked_file: Context manager for locked file access
    - locked_append_jsonl: Append to JSONL with exclusive lock
    - locked_read_jsonl: Read all JSONL records under a shared lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - builder.output.json_writer: Exam history log
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List

import portalocker

logger = logging.getLogger(__name__)


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator:
    """
    Context manager for cross-platform locked file access.

    Args:
        path: Path to file.
        mode: File open mode ('r', 'a', ...).
        lock_type: Lock type (LOCK_EX for exclusive, LOCK_SH for shared).

    Yields:
        Open file handle with lock held.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Ensure file exists for read modes
    if 'r' in mode and not path.exists():
        path.touch()

    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def locked_append_jsonl(path: Path, record: Dict[str, Any]) -> None:
    """
    Append a record to JSONL file with exclusive lock.

    Args:
        path: Path to JSONL file.
        record: Dictionary to append as JSON line.

    Example:
        >>> locked_append_jsonl(history_path, {"exam_id": "abc", "total": 57})
    """
    with locked_file(path, 'a', portalocker.LOCK_EX) as f:
        f.write(json.dumps(record, ensure_ascii=False) + '\n')

    logger.debug(f"Appended record to {path.name}")


def locked_read_jsonl(path: Path) -> List[Dict[str, Any]]:
    """
    Read every record from a JSONL file under a shared lock.

    Blank and malformed lines are skipped with a warning.
    """
    records: List[Dict[str, Any]] = []
    with locked_file(path, 'r', portalocker.LOCK_SH) as f:
        for line_num, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON at {path.name}:{line_num}: {e}")
    return records
