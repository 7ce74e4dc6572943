#!/usr/bin/env python3
"""
MapReduce Job Driver
Creates the coordinator, runs a fixed pool of worker threads against it,
and waits for the reduce phase to finish
"""

import logging
import os
import shutil
import threading
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import List, Optional, Sequence

from common.config import JobConfig
from common.errors import InvalidConfiguration
from coordinator.job_manager import Coordinator
from coordinator.metrics import JobMetrics, MetricsCollector
from worker.function_loader import FunctionLoader
from worker.result_store import ResultStore
from worker.worker import Worker

logger = logging.getLogger(__name__)


class MapReduceJob:
    """One run of a MapReduce job over a list of input files"""

    def __init__(self, input_files: Sequence[str], num_workers: int, num_reduce_tasks: int,
                 config: Optional[JobConfig] = None, job_file: Optional[str] = None,
                 job_id: Optional[str] = None):
        if input_files is None:
            raise InvalidConfiguration("input_files must not be None")
        if num_workers is None or num_workers < 1:
            raise InvalidConfiguration(f"num_workers must be >= 1, got {num_workers}")
        if num_reduce_tasks is None or num_reduce_tasks < 1:
            raise InvalidConfiguration(f"num_reduce_tasks must be >= 1, got {num_reduce_tasks}")

        self.input_files = list(input_files)
        self.num_workers = num_workers
        self.num_reduce_tasks = num_reduce_tasks
        self.config = (config or JobConfig()).validate()
        self.job_id = job_id or uuid.uuid4().hex[:8]
        self.loader = FunctionLoader(job_file)

        self.coordinator: Optional[Coordinator] = None
        self.result_store = ResultStore(self.config.result_path)
        self.workers: List[Worker] = []
        self.futures: List[Future] = []
        self.stop_event = threading.Event()
        self.metrics = MetricsCollector()

    def cleanup_previous_results(self):
        """Remove intermediate and output directories left by an earlier run"""
        for directory in (self.config.output_dir, self.config.intermediate_dir):
            if os.path.exists(directory):
                shutil.rmtree(directory)
                logger.info(f"Removed {directory}")

    def execute(self, timeout: Optional[float] = None) -> int:
        """
        Run the job to completion

        Args:
            timeout: Seconds to wait for the reduce phase; None waits forever

        Returns:
            Final total stored in the result file

        Raises:
            TimeoutError: If the job does not finish within timeout
        """
        self.cleanup_previous_results()

        map_function = self.loader.get_map_function()
        reduce_function = self.loader.get_reduce_function()

        self.coordinator = Coordinator(self.input_files, self.num_reduce_tasks)
        self.stop_event.clear()
        self.workers = [
            Worker(i, self.coordinator, self.result_store, self.config,
                   map_function=map_function, reduce_function=reduce_function,
                   stop_event=self.stop_event)
            for i in range(self.num_workers)
        ]
        self.metrics.start_job(self.job_id, self.input_files, self.num_reduce_tasks, self.num_workers)
        logger.info(f"Job {self.job_id}: {len(self.input_files)} inputs, "
                    f"{self.num_workers} workers, {self.num_reduce_tasks} reduce tasks")

        pool = ThreadPoolExecutor(max_workers=self.num_workers,
                                  thread_name_prefix=f"worker-{self.job_id}")
        self.futures = [pool.submit(w.run) for w in self.workers]
        try:
            self._wait_for_completion(timeout)
        finally:
            self.stop_event.set()
            done, not_done = wait(self.futures, timeout=self.config.shutdown_timeout)
            if not_done:
                logger.warning(f"{len(not_done)} workers still busy after shutdown timeout")
            for future in done:
                if future.exception() is not None:
                    logger.error(f"Worker failed: {future.exception()}")
            # Busy workers finish their current task in the background
            pool.shutdown(wait=False, cancel_futures=True)

        self.metrics.end_job(self.job_id, self.config.result_path)
        total = self.result_store.read_total()
        logger.info(f"Job {self.job_id} completed, result: {total}")
        return total

    def _wait_for_completion(self, timeout: Optional[float]):
        deadline = None if timeout is None else time.time() + timeout
        map_recorded = False

        while not self.coordinator.is_reduce_phase_done():
            if not map_recorded and self.coordinator.is_map_phase_done():
                self.metrics.end_map_phase(self.job_id)
                self.metrics.start_reduce_phase(self.job_id, self.config.intermediate_dir)
                map_recorded = True
            if deadline is not None and time.time() >= deadline:
                status = self.coordinator.get_job_status()
                raise TimeoutError(f"Job {self.job_id} did not finish within {timeout}s: {status}")
            time.sleep(self.config.poll_interval)

        if not map_recorded:
            self.metrics.end_map_phase(self.job_id)
            self.metrics.start_reduce_phase(self.job_id, self.config.intermediate_dir)

    def read_final_result(self) -> Optional[str]:
        """Contents of the result file, or None if it was never written"""
        if not os.path.exists(self.config.result_path):
            return None
        with open(self.config.result_path, 'r', encoding='utf-8') as f:
            return f.read().strip()

    def get_metrics(self) -> Optional[JobMetrics]:
        return self.metrics.get_metrics(self.job_id)
