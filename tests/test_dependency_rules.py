from datetime import date

import pytest

from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.models import DependencyType


def _three_tasks(ts, project_id):
    a = ts.create_task(project_id, "A", planned_start=date(2026, 1, 1), planned_end=date(2026, 1, 2))
    b = ts.create_task(project_id, "B", planned_start=date(2026, 1, 2), planned_end=date(2026, 1, 3))
    c = ts.create_task(project_id, "C", planned_start=date(2026, 1, 3), planned_end=date(2026, 1, 4))
    return a, b, c


def test_closing_a_cycle_is_rejected_with_path(services, project):
    ts = services["task_service"]
    a, b, c = _three_tasks(ts, project.id)
    ts.add_dependency(a.id, b.id)
    ts.add_dependency(b.id, c.id)

    with pytest.raises(BusinessRuleError) as exc:
        ts.add_dependency(c.id, a.id)

    assert exc.value.code == "DEPENDENCY_CYCLE"
    assert "C -> A -> B -> C" in str(exc.value)
    assert len(ts.list_dependencies_for_project(project.id)) == 2


def test_two_node_cycle_is_rejected(services, project):
    ts = services["task_service"]
    a, b, _ = _three_tasks(ts, project.id)
    ts.add_dependency(a.id, b.id)

    with pytest.raises(BusinessRuleError):
        ts.add_dependency(b.id, a.id)


def test_acyclic_edges_are_accepted_including_shortcuts_and_duplicates(services, project):
    ts = services["task_service"]
    a, b, c = _three_tasks(ts, project.id)
    ts.add_dependency(a.id, b.id)
    ts.add_dependency(b.id, c.id)

    shortcut = ts.add_dependency(a.id, c.id, lag_days=2)
    duplicate = ts.add_dependency(a.id, b.id)

    assert shortcut.lag_days == 2
    assert duplicate.predecessor_task_id == a.id
    assert len(ts.list_dependencies_for_project(project.id)) == 4
    assert {d.id for d in ts.list_dependencies_for_task(c.id)} >= {shortcut.id}


def test_self_dependency_is_rejected(services, project):
    ts = services["task_service"]
    a, _, _ = _three_tasks(ts, project.id)

    with pytest.raises(ValidationError) as exc:
        ts.add_dependency(a.id, a.id)

    assert exc.value.code == "DEPENDENCY_SELF"


def test_missing_task_is_rejected(services, project):
    ts = services["task_service"]
    a, _, _ = _three_tasks(ts, project.id)

    with pytest.raises(ValidationError) as exc:
        ts.add_dependency(a.id, "does-not-exist")

    assert exc.value.code == "DEPENDENCY_TASK_MISSING"


def test_task_outside_given_project_is_reported_missing(services, project):
    ps = services["project_service"]
    ts = services["task_service"]
    a, b, _ = _three_tasks(ts, project.id)
    other = ps.create_project("Other")

    with pytest.raises(ValidationError) as exc:
        ts.add_dependency(a.id, b.id, project_id=other.id)

    assert exc.value.code == "DEPENDENCY_TASK_MISSING"


def test_cross_project_dependency_is_rejected(services, project):
    ps = services["project_service"]
    ts = services["task_service"]
    a, _, _ = _three_tasks(ts, project.id)
    other = ps.create_project("Other")
    x = ts.create_task(other.id, "X")

    with pytest.raises(ValidationError) as exc:
        ts.add_dependency(a.id, x.id)

    assert exc.value.code == "DEPENDENCY_CROSS_PROJECT"


def test_dependency_type_accepts_string_codes(services, project):
    ts = services["task_service"]
    a, b, c = _three_tasks(ts, project.id)

    ss = ts.add_dependency(a.id, b.id, dependency_type="ss")
    ff = ts.add_dependency(b.id, c.id, dependency_type=DependencyType.FINISH_TO_FINISH)

    assert ss.dependency_type == DependencyType.START_TO_START
    assert ff.dependency_type == DependencyType.FINISH_TO_FINISH
    stored = {d.id: d for d in ts.list_dependencies_for_project(project.id)}
    assert stored[ss.id].dependency_type == DependencyType.START_TO_START


def test_invalid_type_and_lag_are_rejected(services, project):
    ts = services["task_service"]
    a, b, _ = _three_tasks(ts, project.id)

    with pytest.raises(ValidationError) as bad_type:
        ts.add_dependency(a.id, b.id, dependency_type="XX")
    with pytest.raises(ValidationError) as bad_lag:
        ts.add_dependency(a.id, b.id, lag_days=1.5)

    assert bad_type.value.code == "DEPENDENCY_INVALID_TYPE"
    assert bad_lag.value.code == "DEPENDENCY_INVALID_LAG"


def test_negative_lag_is_allowed(services, project):
    ts = services["task_service"]
    a, b, _ = _three_tasks(ts, project.id)

    dep = ts.add_dependency(a.id, b.id, lag_days=-1)

    assert dep.lag_days == -1


def test_adding_a_dependency_does_not_recalculate(services, project):
    ts = services["task_service"]
    a, b, _ = _three_tasks(ts, project.id)

    ts.add_dependency(a.id, b.id)

    assert ts.get_task(a.id).is_critical_path is False
    assert ts.get_task(a.id).float_days is None


def test_remove_dependency(services, project):
    ts = services["task_service"]
    a, b, c = _three_tasks(ts, project.id)
    ab = ts.add_dependency(a.id, b.id)
    ts.add_dependency(b.id, c.id)

    ts.remove_dependency(ab.id, project_id=project.id)

    remaining = ts.list_dependencies_for_project(project.id)
    assert [d.predecessor_task_id for d in remaining] == [b.id]
    # the removed edge no longer blocks the reverse direction
    ts.add_dependency(b.id, a.id)


def test_remove_unknown_or_foreign_dependency_is_not_found(services, project):
    ps = services["project_service"]
    ts = services["task_service"]
    a, b, _ = _three_tasks(ts, project.id)
    dep = ts.add_dependency(a.id, b.id)
    other = ps.create_project("Other")

    with pytest.raises(NotFoundError) as unknown:
        ts.remove_dependency("nope")
    with pytest.raises(NotFoundError) as foreign:
        ts.remove_dependency(dep.id, project_id=other.id)

    assert unknown.value.code == "DEPENDENCY_NOT_FOUND"
    assert foreign.value.code == "DEPENDENCY_NOT_FOUND"
    assert len(ts.list_dependencies_for_project(project.id)) == 1
