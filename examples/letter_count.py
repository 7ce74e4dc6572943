"""
Letter count MapReduce job.
Counts the alphabetic characters in the input text.
"""


def map_function(file_name, content):
    """
    Map function: emit (letter, 1) for each alphabetic character.

    Args:
        file_name: Source file path (unused)
        content: Full text of the source file

    Yields:
        (letter, 1) tuples
    """
    for ch in content:
        if ch.isalpha():
            yield (ch.lower(), 1)


def reduce_function(key_values):
    """
    Reduce function: count every emitted letter.

    Args:
        key_values: KeyValue records routed to one partition

    Returns:
        Number of letters in the partition
    """
    return sum(int(kv.value) for kv in key_values)
