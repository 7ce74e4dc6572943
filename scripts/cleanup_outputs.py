#!/usr/bin/env python3
"""
Cleanup script for MapReduce intermediate and output files.
Removes all files from medium/ and output/ directories while preserving .gitkeep files.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.cleanup import cleanup_directory, format_size
from common.config import JobConfig


def main():
    """Main cleanup function."""
    parser = argparse.ArgumentParser(
        description="Clean up MapReduce intermediate and output files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                    # Clean both directories
  %(prog)s --intermediate     # Clean only intermediate files
  %(prog)s --output           # Clean only output files
  %(prog)s --dry-run          # Show what would be deleted without deleting
        """
    )
    parser.add_argument('--work-dir', default='.', help='Directory holding medium/ and output/')
    parser.add_argument('--intermediate', '-i', action='store_true', help='Clean only intermediate files')
    parser.add_argument('--output', '-o', action='store_true', help='Clean only output files')
    parser.add_argument('--dry-run', '-n', action='store_true',
                        help='Show what would be deleted without actually deleting')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    config = JobConfig(work_dir=args.work_dir)
    directories = []
    if args.intermediate or not args.output:
        directories.append(Path(config.intermediate_dir))
    if args.output or not args.intermediate:
        directories.append(Path(config.output_dir))

    total_files = 0
    total_bytes = 0
    for directory in directories:
        files, bytes_freed = cleanup_directory(directory, dry_run=args.dry_run)
        total_files += files
        total_bytes += bytes_freed
        print(f"📁 {directory}: {files} files ({format_size(bytes_freed)})")

    if args.dry_run:
        print(f"DRY RUN: Would delete {total_files} files ({format_size(total_bytes)})")
    else:
        print(f"✓ Cleanup complete: {total_files} files deleted ({format_size(total_bytes)})")


if __name__ == "__main__":
    main()
