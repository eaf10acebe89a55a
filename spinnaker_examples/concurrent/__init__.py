from .work_queue import WorkQueue

__all__ = ["WorkQueue"]
