"""Shared fixtures."""

import pytest

from tests.helpers import epub2_files, epub3_files, make_epub


@pytest.fixture
def epub2_bytes() -> bytes:
    return make_epub(epub2_files())


@pytest.fixture
def epub3_bytes() -> bytes:
    return make_epub(epub3_files(), opf_path="content.opf")


@pytest.fixture
def epub2_path(tmp_path, epub2_bytes):
    path = tmp_path / "sample.epub"
    path.write_bytes(epub2_bytes)
    return path
