#!/usr/bin/env python3
"""
Reduce Task Executor
Executes reduce tasks by reading one partition's intermediate files,
applying the reduce function, and adding the result to the shared total
"""

import logging
import os
import time
from typing import Callable, List

from common.key_value import KeyValue
from common.task import ReduceTask
from worker.result_store import ResultStore

logger = logging.getLogger(__name__)


class ReduceExecutor:
    """Executes a single reduce task"""

    def __init__(self, task: ReduceTask, reduce_function: Callable, result_store: ResultStore):
        """
        Initialize the reduce executor

        Args:
            task: The reduce task to run
            reduce_function: Callable(list of KeyValue) returning an int
            result_store: Job-wide result file shared by all workers
        """
        self.task = task
        self.reduce_function = reduce_function
        self.result_store = result_store

    def execute(self) -> dict:
        """
        Execute the reduce task

        An empty partition succeeds without touching the result file.

        Returns:
            Dictionary with 'success', 'contributed', 'execution_time_ms'
            and 'error_message' fields
        """
        start_time = time.time()
        task_id = self.task.task_id

        try:
            key_values = self._read_intermediate()

            if not key_values:
                logger.info(f"Reduce task {task_id}: No key/value pairs found")
                contributed = None
            else:
                contributed = int(self.reduce_function(key_values))
                self.result_store.add(contributed, reduce_task_id=task_id)

            execution_time = int((time.time() - start_time) * 1000)
            logger.info(f"Reduce task {task_id}: Completed in {execution_time}ms, sum: {contributed}")

            return {
                'success': True,
                'contributed': contributed,
                'execution_time_ms': execution_time,
                'error_message': ''
            }

        except Exception as e:
            logger.error(f"Reduce task {task_id} failed: {e}")
            return {
                'success': False,
                'contributed': None,
                'execution_time_ms': int((time.time() - start_time) * 1000),
                'error_message': str(e)
            }

    def _read_intermediate(self) -> List[KeyValue]:
        """
        Read every input file that still exists

        Returns:
            All parsed pairs, concatenated across files
        """
        key_values = []
        files_read = 0
        lines_skipped = 0

        for filepath in self.task.input_files:
            if not os.path.exists(filepath):
                logger.error(f"Reduce task {self.task.task_id}: Intermediate file not found: {filepath}")
                continue

            files_read += 1
            with open(filepath, 'r', encoding='utf-8', errors='ignore') as f:
                for line in f:
                    kv = KeyValue.from_line(line)
                    if kv is None:
                        if line.strip():
                            lines_skipped += 1
                        continue
                    key_values.append(kv)

        logger.debug(f"Reduce task {self.task.task_id}: Read {files_read} files, "
                     f"{len(key_values)} records, skipped {lines_skipped} malformed lines")
        return key_values
