"""Module containing `RequestQueue` class."""


from collections import deque
from concurrent.futures import Future
from queue import Queue
from threading import Lock, Thread
import datetime
import logging
import time

import dayglow.util.logging_utils as logging_utils


_logger = logging.getLogger(__name__)

_RATE_LIMIT_WINDOW = 60.0
"""Duration in seconds of the sliding window of the per-minute limit."""

_RATE_LIMIT_POLL_PERIOD = .25
"""Period in seconds at which a rate-limited worker rechecks its limits."""


class RequestQueue:

    """
    Queue of outbound requests that are run on a pool of worker threads.

    A request comprises an *id* (a string) and a *work* callable that
    takes no arguments. Requests may be submitted on any number of
    threads, but are run on the worker threads of the queue, in FIFO
    order. The number of worker threads bounds the number of requests
    that run concurrently.

    At most one request with a given id is queued or running at any
    time. If a request is submitted with the id of a request that is
    already queued or running, the work of the new request is not run.
    Instead, the submitter receives the future of the existing request,
    so both submitters receive the same result.

    The queue can optionally rate-limit requests. If
    `min_request_interval` is not `None`, a worker will not start a
    request until at least that many seconds have elapsed since the
    previous request started. If `max_requests_per_minute` is not
    `None`, no more than that many requests start in any sixty-second
    window.
    """


    def __init__(
            self, worker_count=1, min_request_interval=None,
            max_requests_per_minute=None, name='Request Queue'):

        if worker_count < 1:
            raise ValueError(
                f'Request queue worker count must be at least one, '
                f'not {worker_count}.')

        self._worker_count = worker_count
        self._min_request_interval = min_request_interval
        self._max_requests_per_minute = max_requests_per_minute
        self._name = name

        self._lock = Lock()

        # Requests that are queued or running, keyed by id.
        self._requests = {}

        self._running_count = 0
        self._start_times = deque()
        self._last_start_time = None
        self._shut_down = False

        self._queue = Queue()

        self._workers = [
            _Worker(self, f'{name} Worker {i + 1}')
            for i in range(worker_count)]

        for worker in self._workers:
            worker.start()


    @property
    def worker_count(self):
        return self._worker_count


    @property
    def min_request_interval(self):
        return self._min_request_interval


    @property
    def max_requests_per_minute(self):
        return self._max_requests_per_minute


    def enqueue(self, request_id, work):

        """
        Enqueues a request.

        :Parameters:
            request_id : str
                the id of the request.

            work : callable
                callable that takes no arguments and performs the work
                of the request.

        :Returns:
            a `concurrent.futures.Future` for the result of `work`. If
            `work` raises an exception, the exception is set on the
            future. If a request with the specified id is already queued
            or running, the future of that request is returned.

        :Raises RuntimeError:
            if the queue has been shut down.
        """

        with self._lock:

            if self._shut_down:
                raise RuntimeError(
                    f'Cannot enqueue request "{request_id}" since '
                    f'{self._name} has been shut down.')

            request = self._requests.get(request_id)

            if request is not None:
                # request with this id is already queued or running

                _logger.debug(
                    f'Request "{request_id}" is already queued or '
                    f'running. Attaching to it.')

                return request.future

            request = _Request(request_id, work)
            self._requests[request_id] = request

            queued_count = len(self._requests) - self._running_count

        _logger.debug(
            f'Queued request "{request_id}" (queue length: '
            f'{queued_count}).')

        self._queue.put(request)

        return request.future


    def cancel(self, request_id):

        """
        Cancels a queued request.

        A request that has already started running cannot be cancelled.

        :Returns:
            `True` if the request was cancelled, or `False` if there
            is no such queued request.
        """

        with self._lock:

            request = self._requests.get(request_id)

            if request is None or not request.future.cancel():
                return False

            del self._requests[request_id]

        _logger.debug(f'Cancelled request "{request_id}".')

        return True


    def is_pending(self, request_id):

        """Tests whether a request is queued or running."""

        with self._lock:
            return request_id in self._requests


    def status(self):

        """Gets a diagnostic description of the state of this queue."""

        with self._lock:

            running_count = self._running_count
            queued_count = len(self._requests) - running_count
            recent_count = len(self._get_recent_start_times(time.monotonic()))
            last_start_time = self._last_start_time

        lines = [
            f'{self._name} Status:',
            f'- Queued requests: {queued_count}',
            f'- In-flight requests: {running_count}',
            f'- Workers: {self._worker_count}']

        if self._max_requests_per_minute is not None:
            lines.append(
                f'- Recent requests (last minute): {recent_count}/'
                f'{self._max_requests_per_minute}')

        if last_start_time is None:
            lines.append('- Last request: None')

        else:
            elapsed = time.monotonic() - last_start_time
            line = f'- Time since last request: {elapsed:.1f}s'
            interval = self._min_request_interval
            if interval is not None and elapsed < interval:
                line += f' (waiting {interval - elapsed:.1f}s)'
            lines.append(line)

        return '\n'.join(lines)


    def shutdown(self, wait=True):

        """
        Shuts down this queue.

        Requests that are still queued are cancelled. If `wait` is
        `True`, this method waits for running requests to complete.
        """

        with self._lock:

            if self._shut_down:
                return

            self._shut_down = True

            for request_id, request in list(self._requests.items()):
                if request.future.cancel():
                    del self._requests[request_id]

        for _ in self._workers:
            self._queue.put(None)

        if wait:
            for worker in self._workers:
                worker.join()


    def _get_recent_start_times(self, now):

        # Must be called with `self._lock` held.

        start_times = self._start_times

        while start_times and now - start_times[0] >= _RATE_LIMIT_WINDOW:
            start_times.popleft()

        return start_times


    def _wait_for_rate_limit(self):

        """
        Waits until rate limits allow another request to start, and
        records the start.
        """

        while True:

            with self._lock:

                now = time.monotonic()
                delay = self._get_rate_limit_delay(now)

                if delay <= 0:
                    self._start_times.append(now)
                    self._last_start_time = now
                    return

            _logger.debug(
                f'Rate limiting active, waiting {delay:.1f} seconds...')

            time.sleep(min(delay, _RATE_LIMIT_POLL_PERIOD))


    def _get_rate_limit_delay(self, now):

        # Must be called with `self._lock` held.

        delay = 0

        interval = self._min_request_interval
        if interval is not None and self._last_start_time is not None:
            delay = max(delay, self._last_start_time + interval - now)

        max_count = self._max_requests_per_minute
        if max_count is not None:
            start_times = self._get_recent_start_times(now)
            if len(start_times) >= max_count:
                delay = max(
                    delay, start_times[0] + _RATE_LIMIT_WINDOW - now)

        return delay


    def _run_request(self, request):

        future = request.future

        if not future.set_running_or_notify_cancel():
            # request was cancelled while queued
            return

        self._wait_for_rate_limit()

        with self._lock:
            self._running_count += 1

        _logger.debug(f'Executing request "{request.id}".')
        start_time = datetime.datetime.now()

        try:
            result = request.work()

        # Work that raises `SystemExit` must still complete its future.
        except BaseException as e:
            _logger.warning(logging_utils.append_stack_trace(
                f'Request "{request.id}" raised {e.__class__.__name__}: '
                f'{str(e)}.'))
            self._finish_request(request)
            future.set_exception(e)

        else:
            elapsed = (datetime.datetime.now() - start_time).total_seconds()
            _logger.debug(
                f'Request "{request.id}" completed in {elapsed:.2f} '
                f'seconds.')
            self._finish_request(request)
            future.set_result(result)


    def _finish_request(self, request):

        # We forget a request before setting its result so that a
        # later submission with the same id runs new work instead of
        # attaching to a completed request.
        with self._lock:
            self._running_count -= 1
            if self._requests.get(request.id) is request:
                del self._requests[request.id]


class _Worker(Thread):


    def __init__(self, request_queue, name):
        super().__init__(name=name, daemon=True)
        self._request_queue = request_queue


    def run(self):

        queue = self._request_queue._queue

        while True:

            request = queue.get()

            try:

                if request is None:
                    # shutdown sentinel
                    return

                self._request_queue._run_request(request)

            finally:
                queue.task_done()


class _Request:


    def __init__(self, id_, work):
        self.id = id_
        self.work = work
        self.future = Future()
