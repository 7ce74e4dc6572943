#!/usr/bin/env python3
"""
MapReduce Worker
Pulls tasks from the coordinator and executes them until told to exit
"""

import logging
import threading
from typing import Callable, Optional

from common.config import JobConfig
from common.errors import InvalidArgument
from common.task import MapTask, ReduceTask, TaskType
from coordinator.job_manager import Coordinator
from worker.function_loader import FunctionLoader
from worker.map_executor import MapExecutor
from worker.reduce_executor import ReduceExecutor
from worker.result_store import ResultStore

logger = logging.getLogger(__name__)


class Worker:
    """Runs the pull/execute loop against one coordinator"""

    def __init__(self, worker_id: int, coordinator: Coordinator, result_store: ResultStore,
                 config: Optional[JobConfig] = None,
                 map_function: Optional[Callable] = None,
                 reduce_function: Optional[Callable] = None,
                 stop_event: Optional[threading.Event] = None):
        if coordinator is None:
            raise InvalidArgument("coordinator must not be None")
        if result_store is None:
            raise InvalidArgument("result_store must not be None")

        defaults = FunctionLoader()
        self.worker_id = worker_id
        self.coordinator = coordinator
        self.result_store = result_store
        self.config = config or JobConfig()
        self.map_function = map_function or defaults.get_map_function()
        self.reduce_function = reduce_function or defaults.get_reduce_function()
        self.stop_event = stop_event or threading.Event()

        self.map_tasks_done = 0
        self.reduce_tasks_done = 0
        self.map_tasks_failed = 0
        self.reduce_tasks_failed = 0

    def stop(self):
        """Ask the loop to stop at its next wait"""
        self.stop_event.set()

    def run(self):
        """Loop until an EXIT task arrives or the stop event is set during a wait"""
        logger.info(f"Worker {self.worker_id} started")

        while True:
            task = self.coordinator.get_task()

            if task.task_type == TaskType.MAP:
                self.process_map_task(task)
            elif task.task_type == TaskType.REDUCE:
                self.process_reduce_task(task)
            elif task.task_type == TaskType.WAIT:
                if self.stop_event.wait(self.config.wait_interval):
                    logger.info(f"Worker {self.worker_id} interrupted while waiting")
                    return
                continue
            elif task.task_type == TaskType.EXIT:
                logger.info(f"Worker {self.worker_id} received EXIT")
                return

            if self.stop_event.wait(self.config.yield_interval):
                logger.info(f"Worker {self.worker_id} interrupted")
                return

    def process_map_task(self, task: MapTask):
        logger.info(f"Worker {self.worker_id} processing map task {task.task_id} "
                    f"for file: {task.source_file}")

        executor = MapExecutor(task, self.map_function, self.config.intermediate_dir)
        result = executor.execute()
        if not result['success']:
            # The task is not reported, so the job cannot leave the map phase
            self.map_tasks_failed += 1
            logger.error(f"Worker {self.worker_id} dropped map task {task.task_id}: "
                         f"{result['error_message']}")
            return

        self.coordinator.complete_map_task(task.task_id, result['output_files'])
        self.map_tasks_done += 1

    def process_reduce_task(self, task: ReduceTask):
        logger.info(f"Worker {self.worker_id} processing reduce task {task.task_id} "
                    f"with {len(task.input_files)} files")

        executor = ReduceExecutor(task, self.reduce_function, self.result_store)
        result = executor.execute()
        if not result['success']:
            self.reduce_tasks_failed += 1
            logger.error(f"Worker {self.worker_id} dropped reduce task {task.task_id}: "
                         f"{result['error_message']}")
            return

        self.coordinator.complete_reduce_task(task.task_id)
        self.reduce_tasks_done += 1
