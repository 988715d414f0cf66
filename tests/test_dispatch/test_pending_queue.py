"""
PendingQueue tests

The queue is hammered from real OS threads to check that the
check-and-remove step is atomic.
"""

import threading

from elevator_dispatch.core.pending_queue import PendingQueue
from elevator_dispatch.core.request import Request


def test_fifo_order():
    queue = PendingQueue()
    requests = [Request(1, 2), Request(3, 4), Request(5, 6)]
    for request in requests:
        queue.submit(request)

    assert [queue.try_claim() for _ in range(3)] == requests
    assert queue.try_claim() is None


def test_empty_queue_claims_nothing():
    queue = PendingQueue()
    assert queue.try_claim() is None
    assert len(queue) == 0
    assert not queue


def test_snapshot_does_not_consume():
    queue = PendingQueue()
    request = Request(2, 8)
    queue.submit(request)
    assert queue.snapshot() == [request]
    assert len(queue) == 1


def test_concurrent_claimers_never_share_a_request():
    num_requests = 2000
    num_claimers = 8
    queue = PendingQueue()
    submitted = [Request(1 + i % 9, 10) for i in range(num_requests)]
    for request in submitted:
        queue.submit(request)

    claims = [[] for _ in range(num_claimers)]
    barrier = threading.Barrier(num_claimers)

    def claimer(index):
        barrier.wait()
        while True:
            request = queue.try_claim()
            if request is None:
                return
            claims[index].append(request)

    threads = [threading.Thread(target=claimer, args=(i,)) for i in range(num_claimers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    all_claims = [request for per_thread in claims for request in per_thread]
    assert len(all_claims) == num_requests
    assert len({r.request_id for r in all_claims}) == num_requests
    assert {r.request_id for r in all_claims} == {r.request_id for r in submitted}


def test_concurrent_submit_and_claim_loses_nothing():
    queue = PendingQueue()
    num_producers = 4
    per_producer = 500
    claimed = []
    claimed_lock = threading.Lock()
    producers_done = threading.Event()

    def producer():
        for _ in range(per_producer):
            queue.submit(Request(1, 2))

    def consumer():
        while True:
            request = queue.try_claim()
            if request is not None:
                with claimed_lock:
                    claimed.append(request)
            elif producers_done.is_set() and not queue:
                return

    producer_threads = [threading.Thread(target=producer) for _ in range(num_producers)]
    consumer_threads = [threading.Thread(target=consumer) for _ in range(3)]
    for thread in consumer_threads + producer_threads:
        thread.start()
    for thread in producer_threads:
        thread.join()
    producers_done.set()
    for thread in consumer_threads:
        thread.join()

    assert len(claimed) == num_producers * per_producer
    assert len({r.request_id for r in claimed}) == len(claimed)
