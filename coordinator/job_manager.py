#!/usr/bin/env python3
"""
Job Manager for MapReduce Coordinator
Handles task queues, completion tracking and the map -> reduce -> done
phase transitions for a single job
"""

import logging
import threading
from collections import deque
from enum import Enum
from typing import Deque, Dict, List, Optional, Sequence, Set, Tuple

from common.errors import (
    InvalidArgument,
    InvalidConfiguration,
    InvalidTaskId,
    MalformedIntermediatePath,
)
from common.partition import parse_partition_index
from common.task import ExitTask, MapTask, ReduceTask, Task, WaitTask

logger = logging.getLogger(__name__)


class JobPhase(Enum):
    """Phase of a MapReduce job"""
    MAP = "map"
    REDUCE = "reduce"
    DONE = "done"


class Coordinator:
    """
    Hands out tasks to workers and tracks their completion

    Every public call that reads or mutates task state runs under one lock,
    so workers never observe a half-updated job. Reduce tasks are only built
    and handed out once every map task has reported its output files.
    """

    def __init__(self, input_files: Optional[Sequence[str]], num_reduce_tasks: int):
        if input_files is None:
            raise InvalidConfiguration("input_files must not be None")
        if num_reduce_tasks is None or num_reduce_tasks < 1:
            raise InvalidConfiguration(f"num_reduce_tasks must be >= 1, got {num_reduce_tasks}")

        self.lock = threading.Lock()
        self._num_reduce_tasks = num_reduce_tasks
        self._total_map_tasks = len(input_files)

        self.pending_map_tasks: Deque[MapTask] = deque(
            MapTask(task_id=i, source_file=path, num_partitions=num_reduce_tasks)
            for i, path in enumerate(input_files)
        )
        self.pending_reduce_tasks: Deque[ReduceTask] = deque()

        self.completed_map_task_ids: Set[int] = set()
        self.completed_reduce_task_ids: Set[int] = set()
        self.map_outputs: Dict[int, Tuple[str, ...]] = {}
        self.map_tasks_completed = 0
        self.reduce_tasks_completed = 0

        self._map_phase_done = False
        self._reduce_phase_done = False
        self.reduce_tasks_built = False

        logger.info(f"Coordinator initialized with {self._total_map_tasks} map tasks "
                    f"and {self._num_reduce_tasks} reduce tasks")

        # Nothing to map: the reduce phase can start straight away
        if self._total_map_tasks == 0:
            with self.lock:
                self._finish_map_phase()

    @property
    def num_reduce_tasks(self) -> int:
        return self._num_reduce_tasks

    @property
    def total_map_tasks(self) -> int:
        return self._total_map_tasks

    def get_task(self) -> Task:
        """
        Return the next unit of work

        Priority: pending map task, WAIT while maps are in flight, pending
        reduce task, WAIT while reduces are in flight, then EXIT.
        """
        with self.lock:
            if self.pending_map_tasks:
                return self.pending_map_tasks.popleft()
            if not self._map_phase_done:
                return WaitTask()
            if self.pending_reduce_tasks:
                return self.pending_reduce_tasks.popleft()
            if not self._reduce_phase_done:
                return WaitTask()
            return ExitTask()

    def complete_map_task(self, task_id: int, output_files: Optional[Sequence[str]]):
        """
        Record a finished map task and the intermediate files it produced

        Raises:
            InvalidTaskId: If task_id is outside [0, total_map_tasks)
            InvalidArgument: If output_files is None
        """
        if task_id is None or not 0 <= task_id < self._total_map_tasks:
            raise InvalidTaskId("map", task_id, self._total_map_tasks)
        if output_files is None:
            raise InvalidArgument("output_files must not be None")

        with self.lock:
            if task_id in self.completed_map_task_ids:
                logger.warning(f"Map task {task_id} already completed, ignoring duplicate report")
                return

            self.completed_map_task_ids.add(task_id)
            self.map_outputs[task_id] = tuple(output_files)
            self.map_tasks_completed += 1

            logger.info(f"Map task {task_id} completed. "
                        f"Progress: {self.map_tasks_completed}/{self._total_map_tasks}")

            if self.map_tasks_completed == self._total_map_tasks and not self.pending_map_tasks:
                self._finish_map_phase()

    def complete_reduce_task(self, task_id: int):
        """
        Record a finished reduce task

        Raises:
            InvalidTaskId: If task_id is outside [0, num_reduce_tasks)
        """
        if task_id is None or not 0 <= task_id < self._num_reduce_tasks:
            raise InvalidTaskId("reduce", task_id, self._num_reduce_tasks)

        with self.lock:
            if task_id in self.completed_reduce_task_ids:
                logger.warning(f"Reduce task {task_id} already completed, ignoring duplicate report")
                return

            self.completed_reduce_task_ids.add(task_id)
            self.reduce_tasks_completed += 1

            logger.info(f"Reduce task {task_id} completed. "
                        f"Progress: {self.reduce_tasks_completed}/{self._num_reduce_tasks}")

            if self.reduce_tasks_completed == self._num_reduce_tasks and not self.pending_reduce_tasks:
                self._reduce_phase_done = True
                logger.info("All reduce tasks completed. Job finished")

    def is_map_phase_done(self) -> bool:
        return self._map_phase_done

    def is_reduce_phase_done(self) -> bool:
        return self._reduce_phase_done

    def get_job_status(self) -> Dict:
        """Get current job phase and progress"""
        with self.lock:
            if self._reduce_phase_done:
                phase = JobPhase.DONE
            elif self._map_phase_done:
                phase = JobPhase.REDUCE
            else:
                phase = JobPhase.MAP

            total_tasks = self._total_map_tasks + self._num_reduce_tasks
            completed_tasks = self.map_tasks_completed + self.reduce_tasks_completed
            progress = int(completed_tasks / total_tasks * 100) if total_tasks > 0 else 0

            return {
                'phase': phase.value,
                'progress': progress,
                'map_completed': self.map_tasks_completed,
                'map_total': self._total_map_tasks,
                'reduce_completed': self.reduce_tasks_completed,
                'reduce_total': self._num_reduce_tasks,
                'pending_map': len(self.pending_map_tasks),
                'pending_reduce': len(self.pending_reduce_tasks),
            }

    def _finish_map_phase(self):
        # Caller holds self.lock
        logger.info("All map tasks completed. Building reduce tasks")
        self._build_reduce_tasks()
        self._map_phase_done = True

    def _build_reduce_tasks(self):
        """Group recorded map outputs by partition into one reduce task each"""
        if self.reduce_tasks_built:
            return
        self.reduce_tasks_built = True

        files_by_partition: Dict[int, List[str]] = {p: [] for p in range(self._num_reduce_tasks)}

        for map_task_id in sorted(self.map_outputs):
            for path in self.map_outputs[map_task_id]:
                try:
                    partition = parse_partition_index(path)
                except MalformedIntermediatePath as e:
                    logger.error(f"Dropping intermediate file: {e}")
                    continue
                if partition not in files_by_partition:
                    logger.error(f"Dropping intermediate file {path}: "
                                 f"partition {partition} out of range")
                    continue
                files_by_partition[partition].append(path)

        for partition in range(self._num_reduce_tasks):
            files = files_by_partition[partition]
            logger.info(f"Reduce task {partition} will process {len(files)} files")
            self.pending_reduce_tasks.append(ReduceTask(task_id=partition, input_files=files))
