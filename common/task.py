"""
Task Types
Immutable units of work handed out by the coordinator
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from common.errors import InvalidArgument


class TaskType(Enum):
    """Kind of work a task describes"""
    MAP = "map"
    REDUCE = "reduce"
    WAIT = "wait"
    EXIT = "exit"


@dataclass(frozen=True)
class MapTask:
    """Transform one source file into partitioned key/value pairs"""
    task_id: int
    source_file: str
    num_partitions: int

    def __post_init__(self):
        if self.task_id < 0:
            raise InvalidArgument(f"Map task id must be >= 0, got {self.task_id}")
        if self.source_file is None:
            raise InvalidArgument("Map task requires a source file")
        if self.num_partitions < 1:
            raise InvalidArgument(f"num_partitions must be >= 1, got {self.num_partitions}")

    @property
    def task_type(self) -> TaskType:
        return TaskType.MAP


@dataclass(frozen=True)
class ReduceTask:
    """Aggregate every intermediate file routed to one partition"""
    task_id: int
    input_files: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.task_id < 0:
            raise InvalidArgument(f"Reduce task id must be >= 0, got {self.task_id}")
        if self.input_files is None:
            raise InvalidArgument("Reduce task requires an input file list")
        # Freeze list arguments so the payload cannot change after creation
        object.__setattr__(self, 'input_files', tuple(self.input_files))

    @property
    def task_type(self) -> TaskType:
        return TaskType.REDUCE

    @property
    def partition(self) -> int:
        return self.task_id


@dataclass(frozen=True)
class WaitTask:
    """No work available yet, ask again later"""

    @property
    def task_type(self) -> TaskType:
        return TaskType.WAIT


@dataclass(frozen=True)
class ExitTask:
    """Job is finished, the worker should stop"""

    @property
    def task_type(self) -> TaskType:
        return TaskType.EXIT


Task = Union[MapTask, ReduceTask, WaitTask, ExitTask]
