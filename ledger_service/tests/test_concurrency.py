import random
import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from ..core.errors import InsufficientFundsError, LedgerError
from ..core.locks import ReadWriteLock
from ..services import Ledger


def test_read_lock_is_shared() -> None:
    lock = ReadWriteLock()
    inside = threading.Barrier(2, timeout=5)

    def reader() -> None:
        with lock.read_locked():
            inside.wait()

    with ThreadPoolExecutor(max_workers=2) as pool:
        for future in [pool.submit(reader) for _ in range(2)]:
            future.result(timeout=5)

def test_writer_excludes_readers() -> None:
    lock = ReadWriteLock()
    reader_done = threading.Event()

    lock.acquire_write()

    def reader() -> None:
        with lock.read_locked():
            reader_done.set()

    thread = threading.Thread(target=reader)
    thread.start()
    assert not reader_done.wait(timeout=0.2)
    lock.release_write()
    assert reader_done.wait(timeout=5)
    thread.join(timeout=5)

def test_waiting_writer_blocks_new_readers() -> None:
    lock = ReadWriteLock()
    lock.acquire_read()
    writer_in = threading.Event()
    late_reader_in = threading.Event()

    def writer() -> None:
        with lock.write_locked():
            writer_in.set()

    def late_reader() -> None:
        with lock.read_locked():
            late_reader_in.set()

    writer_thread = threading.Thread(target=writer)
    writer_thread.start()
    # give the writer time to start waiting on the held read lock
    assert not writer_in.wait(timeout=0.2)

    reader_thread = threading.Thread(target=late_reader)
    reader_thread.start()
    assert not late_reader_in.wait(timeout=0.2)

    lock.release_read()
    assert writer_in.wait(timeout=5)
    assert late_reader_in.wait(timeout=5)
    writer_thread.join(timeout=5)
    reader_thread.join(timeout=5)

def test_lock_released_when_body_raises() -> None:
    lock = ReadWriteLock()
    with pytest.raises(ValueError):
        with lock.write_locked():
            raise ValueError("boom")
    with pytest.raises(ValueError):
        with lock.read_locked():
            raise ValueError("boom")
    # both sides are free again
    with lock.write_locked():
        pass

def test_unbalanced_release_is_an_error() -> None:
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()

def test_concurrent_transfers_conserve_money() -> None:
    ledger = Ledger()
    accounts = [f"acct_{n}" for n in range(5)]
    for account in accounts:
        ledger.create(account)
        ledger.deposit(account, 100)

    def random_transfer(seed: int) -> None:
        rng = random.Random(seed)
        source, dest = rng.choice(accounts), rng.choice(accounts)
        try:
            ledger.transfer(source, dest, Decimal(rng.randint(1, 3000)) / 100)
        except LedgerError:
            pass

    with ThreadPoolExecutor(max_workers=10) as pool:
        list(pool.map(random_transfer, range(2000)))

    balances = [ledger.balance(account) for account in accounts]
    assert sum(balances) == len(accounts) * 100
    assert all(balance >= 0 for balance in balances)

def test_concurrent_withdrawals_never_overdraw() -> None:
    ledger = Ledger()
    ledger.create("shared")
    ledger.deposit("shared", 100)
    accepted = []
    lock = threading.Lock()

    def withdraw_one(_: int) -> None:
        try:
            ledger.withdraw("shared", 1)
        except InsufficientFundsError:
            return
        with lock:
            accepted.append(1)

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(withdraw_one, range(250)))

    assert len(accepted) == 100
    assert ledger.balance("shared") == 0

def test_concurrent_deposits_lose_no_updates() -> None:
    ledger = Ledger()
    ledger.create("pot")

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(lambda _: ledger.deposit("pot", Decimal("0.01")), range(1000)))

    assert ledger.balance("pot") == Decimal("10.00")

def test_readers_never_see_half_a_transfer() -> None:
    ledger = Ledger()
    ledger.create("left")
    ledger.create("right")
    ledger.deposit("left", 50)
    ledger.deposit("right", 50)
    stop = threading.Event()
    observed = set()

    def shuffle() -> None:
        rng = random.Random(7)
        try:
            for _ in range(500):
                pair = ("left", "right") if rng.random() < 0.5 else ("right", "left")
                try:
                    ledger.transfer(*pair, rng.randint(0, 10))
                except InsufficientFundsError:
                    pass
        finally:
            stop.set()

    def audit() -> None:
        while not stop.is_set():
            observed.add(ledger.total_balance())

    with ThreadPoolExecutor(max_workers=3) as pool:
        futures = [pool.submit(audit), pool.submit(audit), pool.submit(shuffle)]
        for future in futures:
            future.result(timeout=30)

    assert observed <= {Decimal(100)}
    assert ledger.total_balance() == 100
