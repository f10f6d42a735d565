# tests/services/resource/test_resource_tree.py

from types import SimpleNamespace

import pytest

from account_admin.services.resource.tree import build_resource_forest, iter_forest

def record(id, full_name, pid=None, is_directory=False):
    return SimpleNamespace(id=id, pid=pid, full_name=full_name, is_directory=is_directory)

class TestBuildResourceForest:
    """Reconstruction of the forest from flat records."""

    def test_empty_input(self):
        assert build_resource_forest([]) == []

    def test_nested_tree(self):
        records = [
            record(1, "sub", is_directory=True),
            record(2, "sub/b.txt", pid=1),
            record(3, "a.txt"),
        ]
        forest = build_resource_forest(records)

        assert [n.id for n in forest] == [1, 3]
        assert [c.full_name for c in forest[0].children] == ["sub/b.txt"]
        assert forest[0].is_directory is True
        assert forest[1].children == []

    def test_children_keep_input_order(self):
        records = [
            record(10, "d", is_directory=True),
            record(13, "d/z.txt", pid=10),
            record(11, "d/a.txt", pid=10),
            record(12, "d/m.txt", pid=10),
        ]
        forest = build_resource_forest(records)
        assert [c.id for c in forest[0].children] == [13, 11, 12]

    def test_child_before_parent_in_input(self):
        records = [record(2, "sub/b.txt", pid=1), record(1, "sub", is_directory=True)]
        forest = build_resource_forest(records)
        assert [n.id for n in forest] == [1]
        assert [c.id for c in forest[0].children] == [2]

    def test_unknown_parent_becomes_root(self):
        # 父目录不属于同一 owner / 类别时，节点作为根出现
        records = [record(5, "shared/x.txt", pid=99), record(6, "y.txt")]
        forest = build_resource_forest(records)
        assert [n.id for n in forest] == [5, 6]

    def test_duplicate_id_is_rejected(self):
        with pytest.raises(ValueError, match="Duplicate resource id 1"):
            build_resource_forest([record(1, "a.txt"), record(1, "b.txt")])

    def test_walk_is_depth_first_pre_order(self):
        records = [
            record(1, "a", is_directory=True),
            record(2, "a/b", pid=1, is_directory=True),
            record(3, "a/b/c.txt", pid=2),
            record(4, "a/d.txt", pid=1),
            record(5, "e.txt"),
        ]
        forest = build_resource_forest(records)
        assert [n.id for n in forest[0].walk()] == [1, 2, 3, 4]
        assert [n.id for n in iter_forest(forest)] == [1, 2, 3, 4, 5]
