"""
Pytest configuration and shared fixtures
"""

import os
import shutil
import sys
import tempfile

import pytest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from common.config import JobConfig  # noqa: E402


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files"""
    dirpath = tempfile.mkdtemp()
    yield dirpath
    shutil.rmtree(dirpath)


@pytest.fixture
def job_config(temp_dir):
    """Config rooted in the temp dir with short poll intervals"""
    return JobConfig(work_dir=temp_dir, wait_interval=0.01, yield_interval=0.0,
                     poll_interval=0.01, shutdown_timeout=5.0)


@pytest.fixture
def sample_lines():
    """Four input lines holding 13 words in total"""
    return [
        "hello world hello java",
        "world java programming",
        "hello programming world",
        "java world test",
    ]


@pytest.fixture
def sample_input_files(temp_dir, sample_lines):
    """One input file per sample line"""
    paths = []
    for i, line in enumerate(sample_lines):
        path = os.path.join(temp_dir, f"input{i + 1}.txt")
        with open(path, 'w') as f:
            f.write(line)
        paths.append(path)
    return paths


@pytest.fixture
def sample_input_file(temp_dir):
    """A single multi-line input file"""
    filepath = os.path.join(temp_dir, 'input.txt')
    with open(filepath, 'w') as f:
        f.write("The quick brown fox jumps over the lazy dog.\n"
                "The dog was really lazy.\n")
    return filepath


@pytest.fixture
def letter_count_job_file():
    """Path to the letter count example job file"""
    return os.path.join(PROJECT_ROOT, 'examples', 'letter_count.py')


@pytest.fixture
def write_intermediate():
    """Factory writing an intermediate file and returning its path"""
    def _write(directory, name, lines):
        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, name)
        with open(path, "w") as f:
            for line in lines:
                f.write(line + "\n")
        return path
    return _write
