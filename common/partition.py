"""
Partitioning and intermediate file naming

Map task M writes the pairs routed to partition P into
``mr-<M>-<P>.txt``; the coordinator recovers P from the file name when it
builds reduce tasks.
"""

import hashlib
import os
import re

from common.errors import InvalidArgument, MalformedIntermediatePath

INTERMEDIATE_PREFIX = "mr"
INTERMEDIATE_EXT = "txt"

_NAME_PATTERN = re.compile(r"^[^-]+-(\d+)-(\d+)\.[^.]+$")


def key_hash(key: str) -> int:
    """Stable hash of a key, identical across processes and runs"""
    digest = hashlib.md5(key.encode('utf-8')).hexdigest()
    return int(digest[:8], 16)


def partition_of(key: str, num_partitions: int) -> int:
    """Map a key to a reduce partition in [0, num_partitions)"""
    if num_partitions < 1:
        raise InvalidArgument(f"num_partitions must be >= 1, got {num_partitions}")
    return abs(key_hash(key)) % num_partitions


def intermediate_file_name(map_task_id: int, partition: int, ext: str = INTERMEDIATE_EXT) -> str:
    return f"{INTERMEDIATE_PREFIX}-{map_task_id}-{partition}.{ext}"


def intermediate_file_path(directory: str, map_task_id: int, partition: int) -> str:
    return os.path.join(directory, intermediate_file_name(map_task_id, partition))


def parse_partition_index(path: str) -> int:
    """
    Extract the partition index from an intermediate file path

    Only the base name is inspected, so directories containing dashes
    do not confuse the parser.

    Raises:
        MalformedIntermediatePath: If the name is not prefix-<map>-<partition>.ext
    """
    match = _NAME_PATTERN.match(os.path.basename(path))
    if not match:
        raise MalformedIntermediatePath(path)
    return int(match.group(2))
