"""
Pytest configuration for the drivepath tests.

Traversal tests run against testutil.MemoryBackend, which gives a fixed
entry order and lets tests inject permission and I/O failures. The tests
under test_native_backend.py use a real temporary directory instead.
"""

import os

import pytest
from hypothesis import HealthCheck, settings

from drivepath import backend as backend_module
from drivepath import util

from testutil import MemoryBackend

# restore_globals is autouse, which hypothesis would otherwise flag for @given tests
settings.register_profile("drivepath", suppress_health_check=[HealthCheck.function_scoped_fixture])
settings.load_profile("drivepath")


@pytest.fixture(autouse=True)
def restore_globals():
    """Put the debug level and the default backend back after each test."""
    level = util.get_debug_level()
    default_backend = backend_module._default_backend
    yield
    util.set_debug_level(level)
    backend_module.set_default_backend(default_backend)


@pytest.fixture
def memfs():
    """An empty in-memory filesystem reporting dot entries."""
    return MemoryBackend()


@pytest.fixture
def sample_tree(memfs):
    r"""
    root\
        a\
            x
        b
    """
    memfs.make_file("root/a/x")
    memfs.make_file("root/b")
    return memfs


@pytest.fixture
def native_root(tmp_path):
    """A temporary directory, as text."""
    return os.fspath(tmp_path)

