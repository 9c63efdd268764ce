"""
Unit tests for domain/services/association_reconciler.py
"""

import pytest

from domain.services.association_reconciler import reconcile_associations


@pytest.mark.unit
class TestReconcileAssociations:

    def test_add_and_remove(self):
        ops = reconcile_associations(["t1", "t2", "t3"], ["t2", "t4"])
        assert ops.adding == ["t4"]
        assert ops.removing == ["t1", "t3"]
        assert ops.existing == ["t2"]
        assert ops.has_changes

    def test_empty_desired_removes_all(self):
        ops = reconcile_associations(["t1", "t2"], [])
        assert ops.removing == ["t1", "t2"]
        assert ops.adding == []
        assert ops.existing == []

    def test_duplicates_collapse(self):
        ops = reconcile_associations(["t1", "t1"], ["t2", "t2", "t1"])
        assert ops.adding == ["t2"]
        assert ops.removing == []
        assert ops.existing == ["t1"]

    def test_unchanged_has_no_changes(self):
        ops = reconcile_associations(["t1", "t2"], ["t2", "t1"])
        assert not ops.has_changes
        assert ops.existing == ["t1", "t2"]

    @pytest.mark.parametrize(
        "stored,desired",
        [
            ([], []),
            (["a"], ["b"]),
            (["a", "b", "c"], ["c", "d", "a", "e"]),
            (["x", "x", "y"], ["y", "z", "z"]),
        ],
    )
    def test_symmetric_difference(self, stored, desired):
        ops = reconcile_associations(stored, desired)
        assert not set(ops.adding) & set(ops.removing)
        assert set(ops.adding) | set(ops.existing) == set(desired)
        assert set(ops.removing) | set(ops.existing) == set(stored)

    def test_accepts_any_iterable(self):
        ops = reconcile_associations(iter(["t1"]), ("t1", "t2"))
        assert ops.adding == ["t2"]
