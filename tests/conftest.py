"""
Pytest configuration and shared fixtures
"""

import pytest
import os
import tempfile
import shutil

from reducer.naming import in_directory, reduce_name
from reducer.records import KeyValue, write_records

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files"""
    dirpath = tempfile.mkdtemp()
    yield dirpath
    shutil.rmtree(dirpath)


@pytest.fixture
def intermediate_name(temp_dir):
    """Intermediate naming function rooted in the temporary directory"""
    return in_directory(temp_dir, reduce_name)


@pytest.fixture
def write_intermediate(intermediate_name):
    """
    Write one map task's output for a reduce partition.

    Usage: write_intermediate('job', map_task, reduce_task, [('k', 'v'), ...])
    """
    def write(job_name, map_task, reduce_task, pairs):
        path = intermediate_name(job_name, map_task, reduce_task)
        write_records(path, [KeyValue(k, v) for k, v in pairs])
        return path
    return write


@pytest.fixture
def sample_text():
    """Sample text for testing"""
    return """The quick brown fox jumps over the lazy dog.
The dog was really lazy.
The fox was very quick and brown.
Quick brown foxes are amazing animals.
Lazy dogs sleep all day."""


@pytest.fixture
def wordcount_job_file():
    """Path to word count example job file"""
    return os.path.join(PROJECT_ROOT, 'examples', 'wordcount.py')


@pytest.fixture
def inverted_index_job_file():
    """Path to inverted index example job file"""
    return os.path.join(PROJECT_ROOT, 'examples', 'inverted_index.py')
