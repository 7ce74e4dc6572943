"""
Performance metrics collection for MapReduce jobs.
"""

import glob
import json
import os
import time
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Sequence

import psutil


def total_size(paths: Sequence[str]) -> int:
    return sum(os.path.getsize(p) for p in paths if os.path.exists(p))


@dataclass
class JobMetrics:
    """Metrics for a single MapReduce job execution."""

    job_id: str
    start_time: float
    end_time: float
    map_phase_start: float
    map_phase_end: float
    reduce_phase_start: float
    reduce_phase_end: float
    num_map_tasks: int
    num_reduce_tasks: int
    num_workers: int
    input_size_bytes: int
    intermediate_size_bytes: int
    output_size_bytes: int
    peak_rss_bytes: int = 0

    @property
    def total_time_seconds(self) -> float:
        """Total job execution time in seconds."""
        return self.end_time - self.start_time

    @property
    def map_phase_time_seconds(self) -> float:
        """Map phase execution time in seconds."""
        return self.map_phase_end - self.map_phase_start

    @property
    def reduce_phase_time_seconds(self) -> float:
        """Reduce phase execution time in seconds."""
        return self.reduce_phase_end - self.reduce_phase_start

    def to_dict(self) -> dict:
        """Convert metrics to dictionary."""
        data = asdict(self)
        data['total_time_seconds'] = self.total_time_seconds
        return data

    def save_to_file(self, filepath: str):
        """Save metrics to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


class MetricsCollector:
    """Collects and manages metrics for MapReduce jobs."""

    def __init__(self):
        self.job_metrics: Dict[str, JobMetrics] = {}
        self.process = psutil.Process()

    def _sample_memory(self, job_id: str):
        rss = self.process.memory_info().rss
        metrics = self.job_metrics[job_id]
        metrics.peak_rss_bytes = max(metrics.peak_rss_bytes, rss)

    def start_job(self, job_id: str, input_files: Sequence[str], num_reduce_tasks: int,
                  num_workers: int):
        """Initialize metrics tracking for a new job."""
        now = time.time()
        self.job_metrics[job_id] = JobMetrics(
            job_id=job_id,
            start_time=now,
            end_time=0,
            map_phase_start=now,
            map_phase_end=0,
            reduce_phase_start=0,
            reduce_phase_end=0,
            num_map_tasks=len(input_files),
            num_reduce_tasks=num_reduce_tasks,
            num_workers=num_workers,
            input_size_bytes=total_size(input_files),
            intermediate_size_bytes=0,
            output_size_bytes=0
        )
        self._sample_memory(job_id)

    def end_map_phase(self, job_id: str):
        """Mark the end of the map phase."""
        if job_id in self.job_metrics:
            self.job_metrics[job_id].map_phase_end = time.time()
            self._sample_memory(job_id)

    def start_reduce_phase(self, job_id: str, intermediate_dir: str):
        """Mark the start of the reduce phase and calculate intermediate data size."""
        if job_id in self.job_metrics:
            self.job_metrics[job_id].reduce_phase_start = time.time()
            pattern = os.path.join(intermediate_dir, "mr-*-*.txt")
            self.job_metrics[job_id].intermediate_size_bytes = total_size(glob.glob(pattern))

    def end_job(self, job_id: str, result_path: str):
        """Mark job completion and calculate output size."""
        if job_id in self.job_metrics:
            now = time.time()
            self.job_metrics[job_id].reduce_phase_end = now
            self.job_metrics[job_id].end_time = now
            self.job_metrics[job_id].output_size_bytes = total_size([result_path])
            self._sample_memory(job_id)

    def get_metrics(self, job_id: str) -> Optional[JobMetrics]:
        """Retrieve metrics for a specific job."""
        return self.job_metrics.get(job_id)
