import threading
from contextlib import contextmanager
from datetime import date

import pytest

from core.services.scheduling import ScheduleLockRegistry
from infra.services import build_service_graph


class RecordingLocks(ScheduleLockRegistry):
    def __init__(self):
        super().__init__()
        self.held = []

    @contextmanager
    def hold(self, project_id):
        self.held.append(project_id)
        with super().hold(project_id):
            yield


@pytest.fixture
def locked(session):
    locks = RecordingLocks()
    graph = build_service_graph(session, locks=locks)
    project = graph.project_service.create_project("Locked")
    return graph.task_service, locks, project


@pytest.mark.parametrize(
    "operation",
    [
        lambda ts, task: ts.archive_task(task.id),
        lambda ts, task: ts.delete_task_permanently(task.id),
        lambda ts, task: ts.save_baseline(task.id),
        lambda ts, task: ts.save_all_baselines(task.project_id),
        lambda ts, task: ts.reorder_tasks(task.project_id, [(task.id, 5)]),
        lambda ts, task: ts.update_task(task.id, name="Renamed"),
    ],
)
def test_task_writes_hold_the_project_lock(locked, operation):
    ts, locks, project = locked
    task = ts.create_task(project.id, "T", planned_start=date(2026, 4, 1), planned_end=date(2026, 4, 3))
    locks.held.clear()

    operation(ts, task)

    assert project.id in locks.held


def test_restore_holds_the_project_lock(locked):
    ts, locks, project = locked
    task = ts.create_task(project.id, "T")
    ts.archive_task(task.id)
    locks.held.clear()

    ts.restore_task(task.id)

    assert locks.held == [project.id]


def test_project_lock_blocks_same_project_only():
    registry = ScheduleLockRegistry()
    entered = threading.Event()
    release = threading.Event()
    other_done = threading.Event()
    same_done = threading.Event()

    def holder():
        with registry.hold("p1"):
            entered.set()
            release.wait(timeout=5)

    def other_project():
        with registry.hold("p2"):
            other_done.set()

    def same_project():
        with registry.hold("p1"):
            same_done.set()

    t_holder = threading.Thread(target=holder)
    t_holder.start()
    assert entered.wait(timeout=5)

    t_other = threading.Thread(target=other_project)
    t_same = threading.Thread(target=same_project)
    t_other.start()
    t_same.start()

    assert other_done.wait(timeout=5)
    assert not same_done.wait(timeout=0.2)

    release.set()
    for t in (t_holder, t_other, t_same):
        t.join(timeout=5)
    assert same_done.is_set()
