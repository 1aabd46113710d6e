# tests/test_task_store.py

from __future__ import annotations

import threading

import pytest

from nelproxy.errors import DuplicateTaskError, EmptyQueueError, TaskNotFoundError
from nelproxy.tasks.task_store import TaskStore

from .conftest import make_task


def test_create_assigns_increasing_unique_ids(store: TaskStore) -> None:
    ids = [store.create(make_task(playbook=f"p{i}.yml")).id for i in range(5)]

    assert ids == [1, 2, 3, 4, 5]
    assert store.count_tasks() == 5


def test_create_ignores_candidate_id(store: TaskStore) -> None:
    task = store.create(make_task(task_id=42))
    assert task.id == 1
    assert store.get(1) == task


def test_duplicate_inventory_playbook_is_rejected(store: TaskStore) -> None:
    first = store.create(make_task("EH2", "deploy.yml"))

    with pytest.raises(DuplicateTaskError):
        store.create(make_task("EH2", "deploy.yml", user="someone-else", tags=()))

    assert store.list_tasks() == [first]


def test_same_playbook_for_other_inventory_is_allowed(store: TaskStore) -> None:
    store.create(make_task("EH2", "deploy.yml"))
    store.create(make_task("EH3", "deploy.yml"))
    assert [t.inventory for t in store.list_tasks()] == ["EH2", "EH3"]


def test_rejected_create_does_not_consume_an_id(store: TaskStore) -> None:
    store.create(make_task("EH2", "a.yml"))
    with pytest.raises(DuplicateTaskError):
        store.create(make_task("EH2", "a.yml"))
    assert store.create(make_task("EH2", "b.yml")).id == 2


def test_list_on_empty_store_signals_empty_queue(store: TaskStore) -> None:
    with pytest.raises(EmptyQueueError):
        store.list_tasks()

    task = store.create(make_task())
    assert store.list_tasks() == [task]


def test_delete_keeps_order_and_second_delete_fails(store: TaskStore) -> None:
    a, b, c = (store.create(make_task(playbook=p)) for p in ("a.yml", "b.yml", "c.yml"))

    assert store.delete(b.id) == b
    assert [t.id for t in store.list_tasks()] == [a.id, c.id]

    with pytest.raises(TaskNotFoundError):
        store.delete(b.id)


def test_ids_are_never_reused_after_delete(store: TaskStore) -> None:
    first = store.create(make_task(playbook="a.yml"))
    store.delete(first.id)

    again = store.create(make_task(playbook="a.yml"))
    assert again.id == 2


def test_get_unknown_id(store: TaskStore) -> None:
    with pytest.raises(TaskNotFoundError) as exc_info:
        store.get(7)
    assert exc_info.value.task_id == 7


def test_concurrent_creates_get_unique_ids(store: TaskStore) -> None:
    n_threads, per_thread = 8, 25
    barrier = threading.Barrier(n_threads)

    def worker(n: int) -> None:
        barrier.wait()
        for i in range(per_thread):
            store.create(make_task(playbook=f"t{n}-{i}.yml"))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(n_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ids = [t.id for t in store.list_tasks()]
    assert sorted(ids) == list(range(1, n_threads * per_thread + 1))
    assert ids == sorted(ids)


def test_concurrent_duplicate_creates_admit_exactly_one(store: TaskStore) -> None:
    n_threads = 16
    barrier = threading.Barrier(n_threads)
    outcomes: list[str] = []
    lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        try:
            store.create(make_task("EH2", "deploy.yml"))
            result = "ok"
        except DuplicateTaskError:
            result = "dup"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(n_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert store.count_tasks() == 1
