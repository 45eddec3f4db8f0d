"""
Shared pytest fixtures. Living at the repository root also puts the top-level
modules (compiler, inkwell) on the import path for the test suite.
"""
import pytest

from compiler import set_verbose


@pytest.fixture(autouse=True)
def quiet():
    """Keep debug logging off between tests."""
    set_verbose(False)
    yield
    set_verbose(False)
