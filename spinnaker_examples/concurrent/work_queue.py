from __future__ import annotations
from logging import Logger
import threading
import traceback
from beartype.typing import Callable, Any, List, Optional

from queue import Queue
from threading import Thread


class WorkQueue():
  """ Fixed pool of worker threads consuming items from a bounded queue.

  An exception raised while processing an item is logged and counted in
  `failures`, the worker then continues with the next item.
  """

  def __init__(self, name: str, run: Callable, logger: Logger,
               num_workers: int = 1, max_size: int = None):

    self.queue: Queue = Queue(max_size or num_workers)
    self.workers: Optional[List[Thread]] = None
    self.num_workers: int = num_workers

    self.name: str = name
    self.run: Callable = run
    self.logger: Logger = logger

    self.failures: int = 0
    self.lock = threading.Lock()

  def enqueue(self, data: Any) -> None:
      assert self.started, f"WorkQueue {self.name} not started"
      return self.queue.put(data)

  def run_worker(self) -> None:
      data = self.queue.get()
      while data is not None:
        try:
          self.run(data)
        except Exception as e:
          self.logger.error(traceback.format_exc())
          self.logger.error(f"Exception in {self.name}: {e}")
          with self.lock:
            self.failures += 1

        data = self.queue.get()

  @property
  def started(self) -> bool:
    return self.workers is not None

  def stop(self) -> None:
    """ Wait for queued items to finish, then join the workers."""
    if self.workers is not None:
      self.logger.debug(f"Stopping WorkQueue {self.name}, ({self.num_workers} threads)")

      for _ in self.workers:
        self.queue.put(None)

      for worker in self.workers:
        worker.join()

      self.workers = None

    self.logger.debug(f"Workqueue done {self.name}")

  def start(self) -> None:
    assert self.workers is None
    self.workers = [Thread(target=self.run_worker, name=f"{self.name}_{i}")
                    for i in range(self.num_workers)]

    for worker in self.workers:
      worker.start()

    self.logger.debug(f"WorkQueue {self.name} started ({self.num_workers} threads)")

  def __enter__(self):
    self.start()
    return self

  def __exit__(self, exc_type, exc_value, traceback):
    self.stop()
