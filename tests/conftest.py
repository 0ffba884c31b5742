"""Shared pytest fixtures for the gmodel test suite."""

import pytest

from gmodel.context import ModelContext, use_context


@pytest.fixture(autouse=True)
def model_context():
    """Give every test its own numbering, starting at 0."""
    with use_context(ModelContext()) as ctx:
        yield ctx
