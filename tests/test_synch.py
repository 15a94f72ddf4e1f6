import pytest

from nachokern.scheduler import Scheduler
from nachokern.synch import Condition, Lock, Semaphore
from nachokern.thread import DeadlockError, Thread, ThreadStatus


@pytest.fixture
def kernel():
    scheduler = Scheduler()
    main = Thread("main", scheduler)
    main.status = ThreadStatus.RUNNING
    scheduler.current_thread = main
    return scheduler, main


def test_negative_initial_value_rejected(kernel):
    scheduler, _ = kernel
    with pytest.raises(ValueError):
        Semaphore("bad", -1, scheduler)


def test_name_is_kept(kernel):
    scheduler, _ = kernel
    assert Semaphore("sem", 0, scheduler).name == "sem"


def test_p_with_available_value_does_not_block(kernel):
    scheduler, main = kernel
    sem = Semaphore("s", 1, scheduler)
    sem.p()
    assert scheduler.current_thread is main
    assert main.status == ThreadStatus.RUNNING


def test_p_on_empty_semaphore_with_nobody_ready_deadlocks(kernel):
    scheduler, _ = kernel
    sem = Semaphore("s", 1, scheduler)
    sem.p()
    with pytest.raises(DeadlockError):
        sem.p()
    assert scheduler.halted


def test_v_without_waiters_lets_later_p_pass(kernel):
    scheduler, main = kernel
    sem = Semaphore("s", 0, scheduler)
    sem.v()
    sem.p()
    assert scheduler.current_thread is main
    assert scheduler.ready_list.is_empty()


def test_p_blocks_until_another_thread_signals(kernel):
    scheduler, main = kernel
    sem = Semaphore("s", 0, scheduler)
    events = []

    def child(arg):
        events.append(arg)
        sem.v()

    worker = Thread("child", scheduler)
    worker.fork(child, "child")
    sem.p()
    events.append("main")
    assert events == ["child", "main"]
    assert worker.join(timeout=5)
    assert worker.error is None
    assert scheduler.current_thread is main


def test_waiters_are_woken_in_fifo_order(kernel):
    scheduler, main = kernel
    sem = Semaphore("s", 0, scheduler)
    order = []

    def waiter(tag):
        sem.p()
        order.append(tag)

    first = Thread("first", scheduler)
    second = Thread("second", scheduler)
    first.fork(waiter, "first")
    second.fork(waiter, "second")
    main.yield_()
    assert order == []
    sem.v()
    sem.v()
    main.yield_()
    assert order == ["first", "second"]
    assert first.join(timeout=5)
    assert second.join(timeout=5)
    assert scheduler.current_thread is main


def test_lock_tracks_held_state():
    lock = Lock("l")
    assert lock.held is False
    lock.acquire()
    assert lock.held is True
    lock.release()
    assert lock.held is False


def test_lock_as_context_manager_releases_on_error():
    lock = Lock("l")
    with pytest.raises(KeyError):
        with lock as held:
            assert held.held is True
            raise KeyError("boom")
    assert lock.held is False


def test_condition_wait_raises():
    lock = Lock("l")
    cond = Condition("c")
    with lock:
        with pytest.raises(RuntimeError):
            cond.wait(lock)


def test_condition_signal_and_broadcast_leave_lock_alone():
    lock = Lock("l")
    cond = Condition("c")
    lock.acquire()
    cond.signal(lock)
    cond.broadcast(lock)
    assert lock.held is True
    assert cond.name == "c"