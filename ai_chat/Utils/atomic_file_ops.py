"""
Atomic file writes for session records and the config file.

Content goes to a temporary file in the target's directory which is then
renamed over the target, so a reader sees either the old record or the new
one, never a half-written file.
"""

import os
import tempfile
from pathlib import Path
from typing import Union

from loguru import logger


def atomic_write_text(
    file_path: Union[str, Path],
    content: str,
    encoding: str = 'utf-8',
    mode: int = 0o600
) -> None:
    """
    Write text content to ``file_path`` atomically.

    Args:
        file_path: Path to the target file
        content: Text content to write
        encoding: Text encoding (default: utf-8)
        mode: File permissions (default: 0o600, records may hold private conversations)

    Raises:
        OSError: If the temporary file cannot be created, written or renamed
    """
    file_path = Path(file_path)
    parent_dir = file_path.parent
    parent_dir.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(
        dir=parent_dir,
        prefix=f".{file_path.name}.",
        suffix=".tmp",
        text=True
    )
    try:
        with os.fdopen(fd, 'w', encoding=encoding) as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(temp_path, mode)
        # os.replace is atomic on POSIX and best-effort on Windows
        os.replace(temp_path, file_path)
    except BaseException:
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
        logger.error(f"Failed to atomically write to {file_path}")
        raise

    logger.debug(f"Atomically wrote {len(content)} chars to {file_path}")
