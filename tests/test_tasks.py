import threading

from app.core.tasks import TaskQueue


def test_tasks_run_in_background():
    queue = TaskQueue(maxsize=10, workers=2, name="test")
    queue.start()
    results = []
    lock = threading.Lock()

    def work(n):
        with lock:
            results.append(n)

    for n in range(5):
        queue.submit(lambda n=n: work(n))
    queue.join()
    queue.stop()

    assert sorted(results) == [0, 1, 2, 3, 4]


def test_failing_task_does_not_stop_worker():
    queue = TaskQueue(maxsize=10, workers=1, name="test")
    queue.start()
    results = []

    def boom():
        raise RuntimeError("boom")

    queue.submit(boom)
    queue.submit(lambda: results.append("after"))
    queue.join()
    queue.stop()

    assert results == ["after"]


def test_full_queue_drops_oldest_task():
    queue = TaskQueue(maxsize=2, workers=1, name="test")
    results = []

    # not started yet, so nothing drains the queue
    for n in range(4):
        queue.submit(lambda n=n: results.append(n))

    assert queue.dropped == 2

    queue.start()
    queue.join()
    queue.stop()

    assert results == [2, 3]


def test_stop_is_idempotent_and_restartable():
    queue = TaskQueue(maxsize=5, workers=1, name="test")
    queue.stop()
    queue.start()
    queue.stop()
    assert not queue.running

    results = []
    queue.start()
    queue.submit(lambda: results.append(1))
    queue.join()
    queue.stop()
    assert results == [1]
