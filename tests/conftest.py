import os
import tempfile

import pytest

from reicalc.db.repository import Repository


@pytest.fixture
def db_url():
    """URL of a throwaway sqlite database."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield f"sqlite:///{path}"
    os.unlink(path)


@pytest.fixture
def repo(db_url):
    return Repository(db_url)
