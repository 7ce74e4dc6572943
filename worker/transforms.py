"""
Built-in map and reduce transforms used when a job supplies none
"""

import logging
import re
from typing import Iterable, List

from common.errors import MalformedValue
from common.key_value import KeyValue

logger = logging.getLogger(__name__)

_WORD_SPLIT = re.compile(r"\W+")


def word_count_map(file_name: str, content: str) -> List[KeyValue]:
    """
    Emit (word, "1") for every word in the content

    Words are runs of word characters, lowercased.
    """
    result = [KeyValue(word.lower(), "1") for word in _WORD_SPLIT.split(content) if word.strip()]
    logger.debug(f"Map function emitted {len(result)} words from {file_name}")
    return result


def parse_int_value(kv: KeyValue) -> int:
    """
    Raises:
        MalformedValue: If the value is not an integer
    """
    try:
        return int(kv.value.strip())
    except ValueError:
        raise MalformedValue(kv.key, kv.value)


def sum_reduce(key_values: Iterable[KeyValue]) -> int:
    """Sum every integer value, skipping (and logging) the ones that don't parse"""
    total = 0
    for kv in key_values:
        try:
            total += parse_int_value(kv)
        except MalformedValue as e:
            logger.warning(f"Skipping value: {e}")
    return total
