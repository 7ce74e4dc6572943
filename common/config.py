"""
Job Configuration
Directory layout and timing knobs shared by the driver, coordinator and workers
"""

import os
from dataclasses import dataclass

from common.errors import InvalidConfiguration

INTERMEDIATE_DIR_NAME = "medium"
OUTPUT_DIR_NAME = "output"
RESULT_FILE_NAME = "result-sum.txt"


@dataclass
class JobConfig:
    """Where a job keeps its files and how often its threads poll"""
    work_dir: str = "."
    intermediate_dir_name: str = INTERMEDIATE_DIR_NAME
    output_dir_name: str = OUTPUT_DIR_NAME
    result_file_name: str = RESULT_FILE_NAME
    wait_interval: float = 0.1
    yield_interval: float = 0.01
    poll_interval: float = 0.1
    shutdown_timeout: float = 10.0

    @property
    def intermediate_dir(self) -> str:
        return os.path.join(self.work_dir, self.intermediate_dir_name)

    @property
    def output_dir(self) -> str:
        return os.path.join(self.work_dir, self.output_dir_name)

    @property
    def result_path(self) -> str:
        return os.path.join(self.output_dir, self.result_file_name)

    def validate(self) -> "JobConfig":
        """Raise InvalidConfiguration for unusable settings"""
        if not self.work_dir:
            raise InvalidConfiguration("work_dir must not be empty")
        for name in ('wait_interval', 'yield_interval', 'poll_interval', 'shutdown_timeout'):
            if getattr(self, name) < 0:
                raise InvalidConfiguration(f"{name} must be >= 0")
        return self

    @classmethod
    def from_env(cls, **overrides) -> "JobConfig":
        """
        Build a config from MAPREDUCE_* environment variables

        Keyword overrides that are not None win over the environment.
        """
        raw_wait = os.getenv('MAPREDUCE_WAIT_INTERVAL', '0.1')
        try:
            wait_interval = float(raw_wait)
        except ValueError:
            raise InvalidConfiguration(f"MAPREDUCE_WAIT_INTERVAL is not a number: {raw_wait!r}")

        values = {
            'work_dir': os.getenv('MAPREDUCE_WORK_DIR', '.'),
            'wait_interval': wait_interval,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values).validate()
