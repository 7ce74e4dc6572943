#!/usr/bin/env python3
"""
Map Task Executor
Executes map tasks by reading a source file, applying the map function,
partitioning output, and writing intermediate files
"""

import logging
import os
import time
from collections import defaultdict
from typing import Callable, Dict, Iterable, List

from common.errors import SourceUnavailable
from common.key_value import KeyValue
from common.partition import intermediate_file_path, partition_of
from common.task import MapTask

logger = logging.getLogger(__name__)


def to_key_value(item) -> KeyValue:
    """Accept KeyValue records or plain (key, value) tuples from user map functions"""
    if isinstance(item, KeyValue):
        return item
    key, value = item
    return KeyValue(str(key), str(value))


class MapExecutor:
    """Executes a single map task"""

    def __init__(self, task: MapTask, map_function: Callable, intermediate_dir: str):
        """
        Initialize the map executor

        Args:
            task: The map task to run
            map_function: Callable(file_name, content) yielding key/value pairs
            intermediate_dir: Directory where mr-<map>-<partition>.txt files go
        """
        self.task = task
        self.map_function = map_function
        self.intermediate_dir = intermediate_dir

    def execute(self) -> dict:
        """
        Execute the map task

        Returns:
            Dictionary with 'success', 'output_files', 'execution_time_ms'
            and 'error_message' fields
        """
        start_time = time.time()
        task_id = self.task.task_id

        try:
            logger.debug(f"Map task {task_id}: Reading {self.task.source_file}")
            content = self._read_source()

            key_values = [to_key_value(item) for item in self.map_function(self.task.source_file, content)]
            logger.debug(f"Map task {task_id}: Map function produced {len(key_values)} pairs")

            intermediate = self._partition(key_values)
            output_files = self._write_intermediate_files(intermediate)

            execution_time = int((time.time() - start_time) * 1000)
            logger.info(f"Map task {task_id}: Wrote {len(output_files)} intermediate files "
                        f"in {execution_time}ms")

            return {
                'success': True,
                'output_files': output_files,
                'execution_time_ms': execution_time,
                'error_message': ''
            }

        except SourceUnavailable as e:
            logger.error(f"Map task {task_id}: {e}")
            return self._failure(start_time, e)
        except Exception as e:
            logger.error(f"Map task {task_id} failed: {e}")
            return self._failure(start_time, e)

    def _failure(self, start_time: float, error: Exception) -> dict:
        return {
            'success': False,
            'output_files': [],
            'execution_time_ms': int((time.time() - start_time) * 1000),
            'error_message': str(error)
        }

    def _read_source(self) -> str:
        """
        Read the whole source file

        Raises:
            SourceUnavailable: If the file does not exist
        """
        if not os.path.exists(self.task.source_file):
            raise SourceUnavailable(self.task.source_file)
        with open(self.task.source_file, 'r', encoding='utf-8', errors='ignore') as f:
            return f.read()

    def _partition(self, key_values: Iterable[KeyValue]) -> Dict[int, List[KeyValue]]:
        intermediate = defaultdict(list)
        for kv in key_values:
            intermediate[partition_of(kv.key, self.task.num_partitions)].append(kv)
        return intermediate

    def _write_intermediate_files(self, intermediate: Dict[int, List[KeyValue]]) -> List[str]:
        """
        Write one file per non-empty partition

        Returns:
            Paths written, ordered by partition index
        """
        os.makedirs(self.intermediate_dir, exist_ok=True)

        output_files = []
        for partition in sorted(intermediate):
            kv_pairs = intermediate[partition]
            if not kv_pairs:
                continue
            filename = intermediate_file_path(self.intermediate_dir, self.task.task_id, partition)
            with open(filename, 'w', encoding='utf-8') as f:
                for kv in kv_pairs:
                    f.write(kv.to_line() + '\n')
            output_files.append(filename)

        return output_files
