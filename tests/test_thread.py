import pytest

from nachokern.scheduler import Scheduler
from nachokern.thread import DeadlockError, Thread, ThreadStatus
from nachokern.utility import Debugger


def boot():
    scheduler = Scheduler(Debugger())
    main = Thread("main", scheduler)
    main.status = ThreadStatus.RUNNING
    scheduler.current_thread = main
    return scheduler, main


def test_new_thread_is_just_created():
    scheduler, _ = boot()
    thread = Thread("fresh", scheduler)
    assert thread.status is ThreadStatus.JUST_CREATED


def test_fork_puts_thread_on_ready_list():
    scheduler, _ = boot()
    worker = Thread("worker", scheduler)
    worker.fork(lambda arg: None, 0)
    assert worker.status is ThreadStatus.READY
    assert list(scheduler.ready_list) == [worker]
    assert worker.join(0.05) is False


def test_fork_twice_raises():
    scheduler, _ = boot()
    worker = Thread("worker", scheduler)
    worker.fork(lambda arg: None, 0)
    with pytest.raises(RuntimeError):
        worker.fork(lambda arg: None, 0)


def test_yield_with_nothing_ready_returns_immediately():
    scheduler, main = boot()
    main.yield_()
    assert scheduler.current_thread is main
    assert main.status is ThreadStatus.RUNNING


def test_yield_on_non_current_thread_raises():
    scheduler, _ = boot()
    other = Thread("other", scheduler)
    with pytest.raises(RuntimeError):
        other.yield_()


def test_ping_pong_between_two_threads():
    scheduler, main = boot()
    record = []

    def body(which):
        for num in range(3):
            record.append((which, num))
            scheduler.current_thread.yield_()

    worker = Thread("forked thread", scheduler)
    worker.fork(body, 1)
    body(0)
    main.finish()
    assert record == [(0, 0), (1, 0), (0, 1), (1, 1), (0, 2), (1, 2)]
    assert worker.join(1)
    assert main.join(1)
    assert scheduler.halted


def test_forked_thread_runs_with_running_status():
    scheduler, main = boot()
    statuses = []
    worker = Thread("worker", scheduler)
    worker.fork(lambda arg: statuses.append(scheduler.current_thread.status), None)
    main.finish()
    assert statuses == [ThreadStatus.RUNNING]
    assert worker.join(1)


def test_argument_is_passed_to_function():
    scheduler, main = boot()
    received = []
    worker = Thread("worker", scheduler)
    worker.fork(received.append, "payload")
    main.finish()
    assert received == ["payload"]


def test_sleep_with_nothing_ready_deadlocks():
    scheduler, main = boot()
    with pytest.raises(DeadlockError):
        main.sleep()
    assert main.status is ThreadStatus.BLOCKED
    assert scheduler.halted


def test_sleeping_thread_is_woken_by_ready_to_run():
    scheduler, main = boot()
    order = []

    def waker(arg):
        order.append("waker")
        scheduler.ready_to_run(main)

    worker = Thread("waker", scheduler)
    worker.fork(waker, None)
    main.sleep()
    order.append("main")
    assert order == ["waker", "main"]
    assert scheduler.current_thread is main
    assert worker.join(1)


def test_finish_with_nothing_ready_halts():
    scheduler, main = boot()
    main.finish()
    assert scheduler.halted
    assert scheduler.failure is None
    assert main.join(0)


def test_error_in_forked_thread_reaches_main():
    scheduler, main = boot()

    def broken(arg):
        raise ValueError(arg)

    worker = Thread("broken", scheduler)
    worker.fork(broken, "bad")
    with pytest.raises(ValueError):
        main.finish()
    assert worker.join(1)
    assert isinstance(worker.error, ValueError)


def test_deadlock_in_forked_thread_reaches_main():
    scheduler, main = boot()
    worker = Thread("stuck", scheduler)
    worker.fork(lambda arg: scheduler.current_thread.sleep(), None)
    with pytest.raises(DeadlockError):
        main.finish()
    assert worker.join(1)
    assert isinstance(worker.error, DeadlockError)


def test_threads_run_in_fork_order():
    scheduler, main = boot()
    order = []
    workers = [Thread(f"t{n}", scheduler) for n in range(3)]
    for n, worker in enumerate(workers):
        worker.fork(order.append, n)
    main.finish()
    assert order == [0, 1, 2]
    assert all(worker.join(1) for worker in workers)