"""
Set-association reconciler.

Diffs the stored and desired target ids of a many-to-many association
(workout to tags). Duplicates in either input collapse into one element and
every output list keeps first-appearance order.
"""

from typing import Iterable, List

from domain.models.operations import AssociationOperations


def _unique(ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(ids))


def reconcile_associations(stored_ids: Iterable[str], desired_ids: Iterable[str]) -> AssociationOperations:
    """
    Compute the association changes from `stored_ids` to `desired_ids`.

    Example:
        >>> ops = reconcile_associations(["t1", "t2", "t3"], ["t2", "t4"])
        >>> ops.adding, ops.removing, ops.existing
        (['t4'], ['t1', 't3'], ['t2'])
    """
    stored = _unique(stored_ids)
    desired = _unique(desired_ids)
    stored_set = set(stored)
    desired_set = set(desired)

    return AssociationOperations(
        existing=[tag_id for tag_id in stored if tag_id in desired_set],
        adding=[tag_id for tag_id in desired if tag_id not in stored_set],
        removing=[tag_id for tag_id in stored if tag_id not in desired_set],
    )
