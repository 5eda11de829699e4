from datetime import date

import pytest

from core.exceptions import NotFoundError, ValidationError
from core.models import TaskStatus, TaskType


def test_create_task_defaults_and_sibling_sort_order(services, project):
    ts = services["task_service"]

    phase = ts.create_task(project.id, "  Phase 1  ", task_type=TaskType.PHASE)
    first = ts.create_task(project.id, "First", parent_id=phase.id)
    second = ts.create_task(project.id, "Second", parent_id=phase.id)
    root2 = ts.create_task(project.id, "Phase 2", task_type=TaskType.PHASE)

    assert phase.name == "Phase 1"
    assert phase.status == TaskStatus.NOT_STARTED
    assert (first.sort_order, second.sort_order) == (1, 2)
    assert (phase.sort_order, root2.sort_order) == (1, 2)
    assert [t.id for t in ts.list_tasks(project.id, parent_id=phase.id)] == [first.id, second.id]
    assert [t.id for t in ts.list_tasks(project.id, roots_only=True)] == [phase.id, root2.id]


def test_create_task_validation(services, project):
    ps = services["project_service"]
    ts = services["task_service"]
    other = ps.create_project("Other")
    foreign_parent = ts.create_task(other.id, "Foreign")

    cases = [
        (dict(name="   "), "TASK_NAME_EMPTY"),
        (dict(name="x" * 501), "TASK_NAME_TOO_LONG"),
        (dict(name="ok", progress=101), "TASK_INVALID_PROGRESS"),
        (dict(name="ok", planned_start=date(2026, 1, 5), planned_end=date(2026, 1, 4)), "TASK_INVALID_DATE"),
        (dict(name="ok", parent_id=foreign_parent.id), "TASK_INVALID_PARENT"),
    ]
    for kwargs, code in cases:
        with pytest.raises(ValidationError) as exc:
            ts.create_task(project.id, **kwargs)
        assert exc.value.code == code

    assert ts.create_task(project.id, "x" * 500).name == "x" * 500


def test_create_task_requires_existing_project(services):
    with pytest.raises(NotFoundError) as exc:
        services["task_service"].create_task("missing-project", "Orphan")

    assert exc.value.code == "PROJECT_NOT_FOUND"


def test_update_task_rejects_moving_under_own_descendant(services, project):
    ts = services["task_service"]
    parent = ts.create_task(project.id, "Parent", task_type=TaskType.WORKSTREAM)
    child = ts.create_task(project.id, "Child", parent_id=parent.id)

    with pytest.raises(ValidationError) as exc:
        ts.update_task(parent.id, parent_id=child.id)

    assert exc.value.code == "TASK_INVALID_PARENT"


def test_update_task_partial_fields(services, project):
    ts = services["task_service"]
    task = ts.create_task(project.id, "Draft", description="d", progress=10)

    updated = ts.update_task(task.id, status=TaskStatus.IN_PROGRESS, progress=40, estimated_cost=1200.0)

    assert updated.name == "Draft"
    assert updated.description == "d"
    assert updated.status == TaskStatus.IN_PROGRESS
    assert updated.progress == 40
    stored = ts.get_task(task.id)
    assert stored.estimated_cost == 1200.0
    assert stored.version == 2


def test_update_task_validates_merged_dates(services, project):
    ts = services["task_service"]
    task = ts.create_task(project.id, "T", planned_start=date(2026, 1, 5), planned_end=date(2026, 1, 9))

    with pytest.raises(ValidationError):
        ts.update_task(task.id, planned_end=date(2026, 1, 1))

    assert ts.get_task(task.id).planned_end == date(2026, 1, 9)


def test_get_unknown_task_is_not_found(services):
    with pytest.raises(NotFoundError) as exc:
        services["task_service"].get_task("nope")

    assert exc.value.code == "TASK_NOT_FOUND"


def test_archive_cascades_to_descendants_and_restore_is_single(services, project):
    ts = services["task_service"]
    phase = ts.create_task(project.id, "Phase", task_type=TaskType.PHASE)
    stream = ts.create_task(project.id, "Stream", task_type=TaskType.WORKSTREAM, parent_id=phase.id)
    leaf = ts.create_task(project.id, "Leaf", parent_id=stream.id)
    keep = ts.create_task(project.id, "Keep")

    count = ts.archive_task(phase.id, archived_by="planner")

    assert count == 3
    assert [t.id for t in ts.list_tasks(project.id)] == [keep.id]
    archived = {t.id: t for t in ts.list_tasks(project.id, archived=True)}
    assert set(archived) == {phase.id, stream.id, leaf.id}
    assert archived[leaf.id].archived_by == "planner"
    assert archived[leaf.id].archived_at is not None

    restored = ts.restore_task(stream.id)

    assert restored.archived is False
    assert {t.id for t in ts.list_tasks(project.id)} == {keep.id, stream.id}
    assert ts.get_task(leaf.id).archived is True


def test_restore_requires_archived_task(services, project):
    ts = services["task_service"]
    task = ts.create_task(project.id, "Live")

    with pytest.raises(NotFoundError):
        ts.restore_task(task.id)


def test_delete_permanently_removes_edges_and_detaches_children(services, project):
    ts = services["task_service"]
    parent = ts.create_task(project.id, "Parent")
    child = ts.create_task(project.id, "Child", parent_id=parent.id)
    other = ts.create_task(project.id, "Other")
    ts.add_dependency(parent.id, other.id)
    ts.add_dependency(other.id, child.id)

    ts.delete_task_permanently(parent.id)

    with pytest.raises(NotFoundError):
        ts.get_task(parent.id)
    assert ts.get_task(child.id).parent_id is None
    remaining = ts.list_dependencies_for_project(project.id)
    assert [(d.predecessor_task_id, d.successor_task_id) for d in remaining] == [(other.id, child.id)]


def test_save_baseline_copies_planned_dates(services, project):
    ts = services["task_service"]
    task = ts.create_task(project.id, "T", planned_start=date(2026, 2, 2), planned_end=date(2026, 2, 6))

    saved = ts.save_baseline(task.id)
    ts.update_task(task.id, planned_end=date(2026, 2, 9))

    stored = ts.get_task(task.id)
    assert saved.baseline_start == date(2026, 2, 2)
    assert stored.baseline_end == date(2026, 2, 6)
    assert stored.planned_end == date(2026, 2, 9)


def test_save_all_baselines_recalculates_critical_path(services, project):
    ts = services["task_service"]
    a = ts.create_task(project.id, "A", planned_start=date(2026, 2, 2), planned_end=date(2026, 2, 6))
    b = ts.create_task(project.id, "B", planned_start=date(2026, 2, 2), planned_end=date(2026, 2, 3))
    ts.create_task(project.id, "Undated")

    count = ts.save_all_baselines(project.id)

    assert count == 2
    stored_a = ts.get_task(a.id)
    assert stored_a.baseline_end == date(2026, 2, 6)
    assert stored_a.is_critical_path is True
    assert ts.get_task(b.id).float_days == 3


def test_save_all_baselines_can_skip_recalculation(services, project):
    ts = services["task_service"]
    a = ts.create_task(project.id, "A", planned_start=date(2026, 2, 2), planned_end=date(2026, 2, 6))

    ts.save_all_baselines(project.id, recalculate=False)

    assert ts.get_task(a.id).baseline_start == date(2026, 2, 2)
    assert ts.get_task(a.id).is_critical_path is False


def test_task_rows_and_export(services, project):
    ts = services["task_service"]
    task = ts.create_task(
        project.id,
        "Week",
        task_type=TaskType.WORKSTREAM,
        planned_start=date(2026, 1, 5),
        planned_end=date(2026, 1, 11),
    )
    ts.create_task(project.id, "Unplanned")

    rows = {row.task.name: row for row in ts.list_task_rows(project.id)}
    assert (rows["Week"].duration_days, rows["Week"].duration_work_days) == (7, 5)
    assert rows["Unplanned"].duration_days is None

    payload = ts.export_tasks(project.id)

    assert payload["project_id"] == project.id
    assert payload["exported_at"]
    exported = {t["id"]: t for t in payload["tasks"]}
    assert exported[task.id]["planned_start"] == "2026-01-05"
    assert exported[task.id]["task_type"] == "workstream"
    assert exported[task.id]["duration_days"] == 7


def test_project_service_create_and_list(services):
    ps = services["project_service"]

    with pytest.raises(ValidationError) as exc:
        ps.create_project("  ")
    beta = ps.create_project("Beta")
    alpha = ps.create_project("Alpha", "first")

    assert exc.value.code == "PROJECT_NAME_EMPTY"
    assert [p.id for p in ps.list_projects()] == [alpha.id, beta.id]
    assert ps.get_project(alpha.id).description == "first"
    assert ps.get_project("nope") is None
    with pytest.raises(NotFoundError):
        ps.require_project("nope")


def test_update_task_clear_flags_reset_parent_and_cost(services, project):
    ts = services["task_service"]
    phase = ts.create_task(project.id, "Phase", task_type=TaskType.PHASE)
    child = ts.create_task(project.id, "Child", parent_id=phase.id, estimated_cost=500.0)

    # None alone leaves both fields as they were
    ts.update_task(child.id, parent_id=None, estimated_cost=None)
    assert ts.get_task(child.id).parent_id == phase.id

    ts.update_task(child.id, clear_parent=True, clear_estimated_cost=True)

    stored = ts.get_task(child.id)
    assert stored.parent_id is None
    assert stored.estimated_cost is None
    assert child.id in [t.id for t in ts.list_tasks(project.id, roots_only=True)]


def test_reorder_tasks_skips_foreign_and_unknown_ids(services, project):
    ts = services["task_service"]
    audit = services["audit_service"]
    other = services["project_service"].create_project("Other")
    first = ts.create_task(project.id, "First")
    second = ts.create_task(project.id, "Second")
    foreign = ts.create_task(other.id, "Foreign")

    moved = ts.reorder_tasks(
        project.id,
        [(second.id, 1), (first.id, 2), (foreign.id, 9), ("missing", 3)],
    )

    assert moved == 2
    assert [t.id for t in ts.list_tasks(project.id, roots_only=True)] == [second.id, first.id]
    assert ts.get_task(foreign.id).sort_order == 1
    reorders = [e for e in audit.list_recent(project_id=project.id) if e.action == "task.reorder"]
    assert len(reorders) == 1
    assert reorders[0].details["count"] == 2
    assert [e for e in audit.list_recent(project_id=other.id) if e.action == "task.reorder"] == []


def test_reorder_tasks_with_unchanged_order_is_a_no_op(services, project):
    ts = services["task_service"]
    task = ts.create_task(project.id, "Only")

    assert ts.reorder_tasks(project.id, [(task.id, task.sort_order)]) == 0
    assert ts.get_task(task.id).version == 1
