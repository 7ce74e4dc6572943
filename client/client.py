#!/usr/bin/env python3
"""
MapReduce Client CLI
Provides commands for running a job, showing its result, and cleaning up old runs
"""

import argparse
import logging
import os
import sys

from common.cleanup import cleanup_work_dir, format_size
from common.config import JobConfig
from common.errors import MapReduceError
from coordinator.framework import MapReduceJob

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT
    )


def run_job(args):
    """Run a MapReduce job and print the final result"""
    missing = [path for path in args.inputs if not os.path.exists(path)]
    for path in missing:
        logger.warning(f"Input file {path} not found, the job will not finish without it")

    try:
        config = JobConfig.from_env(work_dir=args.work_dir)
        job = MapReduceJob(
            input_files=args.inputs,
            num_workers=args.workers,
            num_reduce_tasks=args.reduce_tasks,
            config=config,
            job_file=args.job_file
        )
        job.execute(timeout=args.timeout)
    except (MapReduceError, FileNotFoundError, TimeoutError) as e:
        print(f"Error: {e}")
        return 1

    result = job.read_final_result()
    print("=" * 40)
    if result is None:
        # Every partition was empty, so no reduce task wrote the result file
        print(f"Result file not found: {job.config.result_path}")
    else:
        print(f"FINAL RESULT: {result}")
    print("=" * 40)

    metrics = job.get_metrics()
    if metrics is not None:
        print(f"Completed in {metrics.total_time_seconds:.2f}s "
              f"({metrics.num_map_tasks} map tasks, {metrics.num_reduce_tasks} reduce tasks)")
        if args.metrics_file:
            metrics.save_to_file(args.metrics_file)
            print(f"✓ Metrics written to {args.metrics_file}")

    print("MapReduce job completed successfully!")
    return 0


def show_status(args):
    """Print the result file of the last run in the work dir"""
    config = JobConfig.from_env(work_dir=args.work_dir)
    if not os.path.exists(config.result_path):
        print(f"Result file not found: {config.result_path}")
        return 1

    with open(config.result_path, 'r', encoding='utf-8') as f:
        print(f.read().strip())
    return 0


def cleanup(args):
    """Remove intermediate and output files of earlier runs"""
    config = JobConfig.from_env(work_dir=args.work_dir)
    files, bytes_freed = cleanup_work_dir(config, dry_run=args.dry_run)
    verb = "Would delete" if args.dry_run else "Deleted"
    print(f"{verb} {files} files ({format_size(bytes_freed)})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='MapReduce Client CLI',
        epilog='Example: %(prog)s run file1.txt file2.txt --workers 2 --reduce-tasks 2'
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    parser.add_argument('--work-dir', default=None,
                        help='Directory holding medium/ and output/ (default: $MAPREDUCE_WORK_DIR or .)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    run_parser = subparsers.add_parser(
        'run',
        help='Run a MapReduce job',
        description='Run a job over the given input files with a pool of worker threads'
    )
    run_parser.add_argument('inputs', nargs='+', help='Input files, one map task each')
    run_parser.add_argument('--workers', type=int, default=2, help='Number of worker threads (default: 2)')
    run_parser.add_argument('--reduce-tasks', type=int, default=2, help='Number of reduce tasks (default: 2)')
    run_parser.add_argument('--job-file', help='Python file with map_function/reduce_function')
    run_parser.add_argument('--metrics-file', help='Write job metrics as JSON to this file')
    run_parser.add_argument('--timeout', type=float, default=None, help='Give up after this many seconds')
    run_parser.set_defaults(func=run_job)

    status_parser = subparsers.add_parser(
        'status',
        help='Show job result',
        description='Print the result file of the last run'
    )
    status_parser.set_defaults(func=show_status)

    cleanup_parser = subparsers.add_parser(
        'cleanup',
        help='Remove files from earlier runs',
        description='Delete intermediate and output files in the work dir'
    )
    cleanup_parser.add_argument('--dry-run', '-n', action='store_true',
                                help='Show what would be deleted without deleting')
    cleanup_parser.set_defaults(func=cleanup)

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # If no command specified, print help
    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    configure_logging(args.verbose)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
