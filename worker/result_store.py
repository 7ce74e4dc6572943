"""
Shared result file for the job-wide running total

All workers of a job share one ResultStore; its lock serialises the
read-modify-write of the result file.
"""

import logging
import os
import tempfile
import threading
from typing import Optional

from common.errors import ResultArtifactCorrupt

logger = logging.getLogger(__name__)

RESULT_PREFIX = "key result: "


def format_result(total: int) -> str:
    return f"{RESULT_PREFIX}{total}"


def parse_result(content: str) -> int:
    """Parse 'key result: N' (or a bare integer) into N"""
    text = content.strip()
    if text.startswith(RESULT_PREFIX):
        text = text[len(RESULT_PREFIX):].strip()
    return int(text)


class ResultStore:
    """Additive accumulator persisted in a single text file"""

    def __init__(self, path: str):
        self.path = path
        self.lock = threading.Lock()

    def read_total(self) -> int:
        """
        Current total, 0 if the file doesn't exist yet

        Raises:
            ResultArtifactCorrupt: If the file content can't be parsed
        """
        if not os.path.exists(self.path):
            return 0
        with open(self.path, 'r', encoding='utf-8', errors='replace') as f:
            content = f.read()
        try:
            return parse_result(content)
        except ValueError:
            raise ResultArtifactCorrupt(self.path, content)

    def add(self, amount: int, reduce_task_id: Optional[int] = None) -> int:
        """
        Add amount to the stored total and return the new total

        A corrupt or unreadable file is treated as 0.
        """
        with self.lock:
            directory = os.path.dirname(self.path) or "."
            os.makedirs(directory, exist_ok=True)

            try:
                current = self.read_total()
            except (ResultArtifactCorrupt, OSError) as e:
                logger.warning(f"Error reading result file, starting over from 0: {e}")
                current = 0

            new_total = current + amount
            self._write_atomic(directory, format_result(new_total))

            logger.info(f"Added {amount} to result (was: {current}, now: {new_total}) "
                        f"for reduce task {reduce_task_id}")
            return new_total

    def _write_atomic(self, directory: str, content: str):
        fd, temp_path = tempfile.mkstemp(prefix=".result-", dir=directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
            os.replace(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
