"""
Discovery worker pool for the Printer Discovery Module.

A fixed number of worker threads drain a bounded address queue, probe each
address and collect the positive matches. The queue is the single point of
work distribution, so every address is probed by exactly one worker.
"""

import queue
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Iterable, List, Optional

from .data_models import DiscoveredPrinter
from ..utils.error_handler import ConfigurationError
from ..utils.logger import Logger, get_logger

Probe = Callable[[str], Optional[DiscoveredPrinter]]
DiscoveryCallback = Callable[[DiscoveredPrinter], None]

DEFAULT_WORKERS = 10

# Enqueued once per worker after the last address
_QUEUE_CLOSED = object()


class DiscoveryWorkerPool:
    """
    Bounded pool of concurrent probe workers.

    At most ``workers`` probes are in flight at any time. Results are kept in
    the order probes completed, which is not address order.
    """

    def __init__(
        self,
        probe: Probe,
        workers: int = DEFAULT_WORKERS,
        on_discovery: Optional[DiscoveryCallback] = None,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the pool.

        Args:
            probe: Returns a DiscoveredPrinter for a printer address, None otherwise
            workers: Number of concurrent workers (and queue capacity)
            on_discovery: Called from the worker thread for each positive match
            logger: Logger instance for diagnostics

        Raises:
            ConfigurationError: If workers is smaller than 1
        """
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise ConfigurationError(f"Worker count must be a positive integer, got {workers!r}")

        self.probe = probe
        self.workers = workers
        self.on_discovery = on_discovery
        self.logger = logger or get_logger(__name__)

        self._lock = threading.Lock()
        self._found: List[DiscoveredPrinter] = []
        self.addresses_processed = 0

    def run(self, addresses: Iterable[str]) -> List[DiscoveredPrinter]:
        """
        Probe every address and return the printers found.

        Blocks until the address sequence is exhausted and every worker has
        exited.

        Args:
            addresses: Addresses to probe, consumed once

        Returns:
            Discovered printers in probe completion order
        """
        with self._lock:
            self._found = []
            self.addresses_processed = 0

        work_queue: "queue.Queue" = queue.Queue(maxsize=self.workers)

        with ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="printer-discovery"
        ) as executor:
            futures = [
                executor.submit(self._worker, work_queue)
                for _ in range(self.workers)
            ]
            try:
                for address in addresses:
                    work_queue.put(address)
            finally:
                for _ in range(self.workers):
                    work_queue.put(_QUEUE_CLOSED)

            wait(futures)
            for future in futures:
                future.result()

        with self._lock:
            found = list(self._found)

        self.logger.debug(
            f"Discovery pool finished: {self.addresses_processed} addresses probed, "
            f"{len(found)} printers found"
        )
        return found

    def _worker(self, work_queue: "queue.Queue") -> None:
        while True:
            address = work_queue.get()
            try:
                if address is _QUEUE_CLOSED:
                    return
                self._process(address)
            finally:
                work_queue.task_done()

    def _process(self, address: str) -> None:
        try:
            printer = self.probe(address)
        except Exception as e:
            # A broken probe must not stall the queue; the address is dropped
            self.logger.error(f"Probe of {address} failed unexpectedly", exception=e)
            printer = None

        with self._lock:
            self.addresses_processed += 1
            if printer is not None:
                self._found.append(printer)

        if printer is not None and self.on_discovery is not None:
            try:
                self.on_discovery(printer)
            except Exception as e:
                self.logger.error(f"Discovery callback failed for {address}", exception=e)
