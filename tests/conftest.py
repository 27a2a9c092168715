"""
Pytest configuration and shared fixtures
"""

import pytest
import os
import tempfile
import shutil


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files"""
    dirpath = tempfile.mkdtemp()
    yield dirpath
    shutil.rmtree(dirpath)


@pytest.fixture
def sample_text():
    """Sample text for testing"""
    return """The quick brown fox jumps over the lazy dog.
The dog was really lazy.
The fox was very quick and brown.
Quick brown foxes are amazing animals.
Lazy dogs sleep all day."""


@pytest.fixture
def sample_input_file(temp_dir, sample_text):
    """Create a sample input file for testing"""
    filepath = os.path.join(temp_dir, 'input.txt')
    with open(filepath, 'w') as f:
        f.write(sample_text)
    return filepath


@pytest.fixture
def sample_files(temp_dir):
    """Several small input files with known contents"""
    contents = [
        "The quick brown fox. The Fox runs.",
        "the lazy dog sleeps; the DOG dreams",
        "fox-hunting 42 times, 42 foxes!",
        "",
        "Zebra zebra ZEBRA apple Apple",
    ]
    paths = []
    for i, text in enumerate(contents):
        path = os.path.join(temp_dir, f'file{i}.txt')
        with open(path, 'w') as f:
            f.write(text)
        paths.append(path)
    return paths


@pytest.fixture
def filelist(temp_dir, sample_files):
    """Write a file list naming every sample file"""
    path = os.path.join(temp_dir, 'filelist.txt')
    with open(path, 'w') as f:
        f.write('\n'.join(sample_files) + '\n')
    return path



@pytest.fixture
def sample_counts():
    """Word counts across all sample files"""
    return {
        'the': 4, 'quick': 1, 'brown': 1, 'fox': 3, 'runs': 1,
        'lazy': 1, 'dog': 2, 'sleeps': 1, 'dreams': 1,
        'hunting': 1, '42': 2, 'times': 1, 'foxes': 1,
        'zebra': 3, 'apple': 2,
    }
