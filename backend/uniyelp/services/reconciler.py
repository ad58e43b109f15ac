"""
Hierarchy Reconciler - desired-set vs current-set sync of catalog junctions

Given a parent key and the full list of child ids the parent should be linked
to, the reconciler works out which links to add and which to remove and
applies only that delta:

    current  = children linked to parent (active rows only on soft edges)
    to_add   = desired - current
    to_remove = current - desired

Removal follows the edge's policy: hard edges delete the rows, soft edges set
``is_active = False``. Adding always inserts a fresh row, even when a
deactivated row for the same pair exists. Rows outside both sets are not
touched.

The reconciler works on the session handed to it and only flushes. Commit and
rollback belong to the caller (``uniyelp.core.database.transaction``).
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from uniyelp.core.errors import StoreFailure
from uniyelp.models.catalog import (
    CollegeDepartment,
    CollegeDepartmentProgram,
    CollegeDepartmentProgramCourse,
)

logger = logging.getLogger(__name__)


class RemovalPolicy(str, Enum):
    HARD_DELETE = "hard"
    SOFT_DEACTIVATE = "soft"


@dataclass(frozen=True)
class JunctionEdge:
    """A parent -> child junction table and how links are removed from it."""
    name: str
    model: type
    parent_column: str
    child_column: str
    removal_policy: RemovalPolicy

    @property
    def parent_attr(self):
        return getattr(self.model, self.parent_column)

    @property
    def child_attr(self):
        return getattr(self.model, self.child_column)


@dataclass(frozen=True)
class ReconcileResult:
    added: int
    removed: int

    def to_dict(self):
        return {"added": self.added, "removed": self.removed}


class HierarchyReconciler:
    """Reconciles the children of one parent on one ``JunctionEdge``."""

    def __init__(self, edge: JunctionEdge):
        self.edge = edge

    def current_child_ids(self, tx: Session, parent_key: str, policy: Optional[RemovalPolicy] = None) -> Set[str]:
        policy = policy or self.edge.removal_policy
        query = tx.query(self.edge.child_attr).filter(self.edge.parent_attr == parent_key)
        if policy == RemovalPolicy.SOFT_DEACTIVATE:
            query = query.filter(self.edge.model.is_active.is_(True))
        return {row[0] for row in query.all()}

    def reconcile(
        self,
        tx: Session,
        parent_key: str,
        desired_child_ids: Iterable[str],
        policy: Optional[RemovalPolicy] = None,
    ) -> ReconcileResult:
        """
        Bring the links of ``parent_key`` in line with ``desired_child_ids``.

        An empty desired set detaches every current child. The parent's
        existence is not checked here.

        Raises:
            StoreFailure: any error from the database layer
        """
        policy = RemovalPolicy(policy or self.edge.removal_policy)
        desired = set(desired_child_ids)

        try:
            current = self.current_child_ids(tx, parent_key, policy)
            to_add = desired - current
            to_remove = current - desired

            if to_remove:
                self._remove(tx, parent_key, to_remove, policy)

            if to_add:
                tx.add_all([
                    self.edge.model(**{self.edge.parent_column: parent_key, self.edge.child_column: child_id})
                    for child_id in sorted(to_add)
                ])
                tx.flush()
        except SQLAlchemyError as exc:
            logger.error("Reconciling %s for %s failed", self.edge.name, parent_key, exc_info=True)
            raise StoreFailure(f"Failed to reconcile {self.edge.name}") from exc

        logger.info(
            "Reconciled %s for %s: +%d -%d (%s)",
            self.edge.name, parent_key, len(to_add), len(to_remove), policy.value,
        )
        return ReconcileResult(added=len(to_add), removed=len(to_remove))

    def _remove(self, tx: Session, parent_key: str, child_ids: Set[str], policy: RemovalPolicy) -> None:
        query = tx.query(self.edge.model).filter(
            self.edge.parent_attr == parent_key,
            self.edge.child_attr.in_(sorted(child_ids)),
        )
        if policy == RemovalPolicy.HARD_DELETE:
            query.delete(synchronize_session="fetch")
        else:
            query.filter(self.edge.model.is_active.is_(True)).update(
                {self.edge.model.is_active: False}, synchronize_session="fetch"
            )
        tx.flush()


# =============================================================================
# Catalog edges
# =============================================================================

COLLEGE_DEPARTMENTS = "college_departments"
COLLEGE_DEPARTMENT_PROGRAMS = "college_department_programs"
COLLEGE_DEPARTMENT_PROGRAM_COURSES = "college_department_program_courses"


def edges_from_settings(settings) -> Dict[str, JunctionEdge]:
    """The three catalog edges with their configured removal policies."""
    return {
        COLLEGE_DEPARTMENTS: JunctionEdge(
            name=COLLEGE_DEPARTMENTS,
            model=CollegeDepartment,
            parent_column="college_id",
            child_column="department_id",
            removal_policy=RemovalPolicy(settings.DEPARTMENT_LINK_REMOVAL),
        ),
        COLLEGE_DEPARTMENT_PROGRAMS: JunctionEdge(
            name=COLLEGE_DEPARTMENT_PROGRAMS,
            model=CollegeDepartmentProgram,
            parent_column="college_department_id",
            child_column="program_id",
            removal_policy=RemovalPolicy(settings.PROGRAM_LINK_REMOVAL),
        ),
        COLLEGE_DEPARTMENT_PROGRAM_COURSES: JunctionEdge(
            name=COLLEGE_DEPARTMENT_PROGRAM_COURSES,
            model=CollegeDepartmentProgramCourse,
            parent_column="college_department_program_id",
            child_column="course_id",
            removal_policy=RemovalPolicy(settings.COURSE_LINK_REMOVAL),
        ),
    }


def reconcilers_from_settings(settings) -> Dict[str, HierarchyReconciler]:
    return {name: HierarchyReconciler(edge) for name, edge in edges_from_settings(settings).items()}
