"""
Cleanup helpers for MapReduce intermediate and output files
Removes files from the medium/ and output/ directories while preserving .gitkeep files
"""

import logging
from pathlib import Path
from typing import Tuple

from common.config import JobConfig

logger = logging.getLogger(__name__)


def cleanup_directory(directory: Path, dry_run: bool = False) -> Tuple[int, int]:
    """
    Remove all files from a directory except .gitkeep

    Args:
        directory: Path to the directory to clean
        dry_run: If True, only report what would be deleted

    Returns:
        tuple: (files_deleted, bytes_freed)
    """
    if not directory.exists():
        logger.debug(f"Directory does not exist: {directory}")
        return 0, 0

    files_deleted = 0
    bytes_freed = 0

    for item in directory.iterdir():
        if item.name == ".gitkeep" or not item.is_file():
            continue

        file_size = item.stat().st_size
        if dry_run:
            logger.info(f"Would delete: {item} ({file_size} bytes)")
        else:
            try:
                item.unlink()
            except OSError as e:
                logger.error(f"Error deleting {item}: {e}")
                continue
        files_deleted += 1
        bytes_freed += file_size

    return files_deleted, bytes_freed


def cleanup_work_dir(config: JobConfig, dry_run: bool = False) -> Tuple[int, int]:
    """Clean both the intermediate and the output directory of a work dir"""
    total_files = 0
    total_bytes = 0
    for directory in (config.intermediate_dir, config.output_dir):
        files, bytes_freed = cleanup_directory(Path(directory), dry_run=dry_run)
        total_files += files
        total_bytes += bytes_freed
    return total_files, total_bytes


def format_size(size_bytes: float) -> str:
    """Format bytes into human-readable size."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.2f} TB"
