# tests/services/resource/test_replicator.py

from types import SimpleNamespace

import pytest

from account_admin.services.exceptions import ResourceMissingError
from account_admin.services.resource.replicator import replicate_forest
from account_admin.services.resource.tree import build_resource_forest

pytestmark = pytest.mark.asyncio

SRC = "/scheduler/t1/resources"
DST = "/scheduler/t2/resources"

def record(id, full_name, pid=None, is_directory=False):
    return SimpleNamespace(id=id, pid=pid, full_name=full_name, is_directory=is_directory)

@pytest.fixture
def sample_forest(files):
    files.write(f"{SRC}/a.txt", "A")
    files.write(f"{SRC}/sub/b.txt", "B")
    files.mkdir(f"{SRC}/empty")
    return build_resource_forest([
        record(1, "a.txt"),
        record(2, "sub", is_directory=True),
        record(3, "sub/b.txt", pid=2),
        record(4, "empty", is_directory=True),
    ])

class TestReplicateForest:

    async def test_copies_files_and_directories(self, storage, files, sample_forest):
        report = await replicate_forest(storage, sample_forest, SRC, DST)

        assert files.read(f"{DST}/a.txt") == "A"
        assert files.read(f"{DST}/sub/b.txt") == "B"
        assert files.path(f"{DST}/empty").is_dir()
        assert report.copied_files == [f"{DST}/a.txt", f"{DST}/sub/b.txt"]
        assert report.created_directories == [f"{DST}/empty"]
        # 源文件保持不变
        assert files.read(f"{SRC}/a.txt") == "A"

    async def test_is_idempotent(self, storage, files, sample_forest):
        await replicate_forest(storage, sample_forest, SRC, DST)
        second = await replicate_forest(storage, sample_forest, SRC, DST)

        assert files.read(f"{DST}/a.txt") == "A"
        assert files.read(f"{DST}/sub/b.txt") == "B"
        assert second.copied_files == [f"{DST}/a.txt", f"{DST}/sub/b.txt"]
        # 空目录已存在，不再重复创建
        assert second.created_directories == []

    async def test_overwrites_existing_destination(self, storage, files, sample_forest):
        files.write(f"{DST}/a.txt", "stale")
        await replicate_forest(storage, sample_forest, SRC, DST)
        assert files.read(f"{DST}/a.txt") == "A"

    async def test_fails_fast_on_missing_source(self, storage, files):
        files.write(f"{SRC}/a.txt", "A")
        files.write(f"{SRC}/c.txt", "C")
        forest = build_resource_forest([
            record(1, "a.txt"),
            record(2, "b.txt"),
            record(3, "c.txt"),
        ])

        with pytest.raises(ResourceMissingError) as exc_info:
            await replicate_forest(storage, forest, SRC, DST)

        assert exc_info.value.full_name == "b.txt"
        assert exc_info.value.path == f"{SRC}/b.txt"
        assert files.exists(f"{DST}/a.txt")
        assert not files.exists(f"{DST}/c.txt")

    async def test_missing_directory_aborts_before_children(self, storage, files):
        forest = build_resource_forest([
            record(1, "gone", is_directory=True),
            record(2, "gone/x.txt", pid=1),
        ])
        with pytest.raises(ResourceMissingError):
            await replicate_forest(storage, forest, SRC, DST)
        assert not files.exists(f"{DST}/gone")

    async def test_empty_forest_is_a_no_op(self, storage, files):
        report = await replicate_forest(storage, [], SRC, DST)
        assert report.copied_files == []
        assert not files.exists(DST)
