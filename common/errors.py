"""
MapReduce Error Types
Exceptions raised by the coordinator, workers and shared helpers
"""


class MapReduceError(Exception):
    """Base class for all MapReduce errors"""


class InvalidConfiguration(MapReduceError, ValueError):
    """Job cannot be constructed from the given inputs"""


class InvalidArgument(MapReduceError, ValueError):
    """A required argument is missing or malformed"""


class InvalidTaskId(MapReduceError, ValueError):
    """Task id is outside the range known to the coordinator"""

    def __init__(self, task_kind: str, task_id: int, upper: int):
        self.task_kind = task_kind
        self.task_id = task_id
        self.upper = upper
        super().__init__(f"Invalid {task_kind} task id {task_id} (expected 0 <= id < {upper})")


class SourceUnavailable(MapReduceError):
    """Input or intermediate file is missing"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File not found: {path}")


class MalformedIntermediatePath(MapReduceError):
    """Intermediate file name does not follow prefix-<map>-<partition>.ext"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Cannot parse partition index from file name: {path}")


class MalformedValue(MapReduceError):
    """Value could not be parsed as an integer during aggregation"""

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"Invalid value {value!r} for key {key!r}")


class ResultArtifactCorrupt(MapReduceError):
    """Existing result file could not be parsed"""

    def __init__(self, path: str, content: str):
        self.path = path
        self.content = content
        super().__init__(f"Unreadable result file {path}: {content!r}")
