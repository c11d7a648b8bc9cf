import time
from contextlib import contextmanager
from typing import Dict, List
from graph_resolve.utils.logger import get_logger

profile_logger = get_logger(__name__)


class PathTimer():
    """durations (ms) of every node resolved under one selection path"""
    def __init__(self, path: str):
        self.path = path
        self.records: List[float] = []

    @contextmanager
    def measure(self):
        start = time.perf_counter()
        try:
            yield
        finally:
            self.records.append((time.perf_counter() - start) * 1000)

    @property
    def depth(self) -> int:
        return self.path.count('.')

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def total(self) -> float:
        return sum(self.records)

    @property
    def average(self) -> float:
        return self.total / self.count if self.records else 0

    @property
    def max(self) -> float:
        return max(self.records, default=0)

    @property
    def min(self) -> float:
        return min(self.records, default=0)

    def __repr__(self) -> str:
        return f'nodes: {self.count}, avg: {self.average:.3f}ms, max: {self.max:.3f}ms, total: {self.total:.3f}ms'


class Profile():
    """
    timings keyed by selection path

    Author
      .books
        .author
    """
    def __init__(self):
        self.timers: Dict[str, PathTimer] = {}

    def get_timer(self, path: str) -> PathTimer:
        if path not in self.timers:
            self.timers[path] = PathTimer(path)
        return self.timers[path]

    def _label(self, timer: PathTimer) -> str:
        if timer.depth == 0:
            return timer.path
        return '  ' * timer.depth + '.' + timer.path.rsplit('.', 1)[-1]

    def __repr__(self) -> str:
        timers = sorted(self.timers.values(), key=lambda t: t.path)
        labels = [self._label(t) for t in timers]
        width = max((len(label) for label in labels), default=0)
        return '\n'.join(f'{label.ljust(width)} | {t}' for label, t in zip(labels, timers))

    def report(self):
        if self.timers:
            profile_logger.debug('\n' + self.__repr__())
