"""Wall-clock timing with an injectable clock for tests"""
import time


class Stopwatch:
    """Measures elapsed milliseconds from construction or the last restart()"""

    def __init__(self, clock=None):
        self.clock = clock or time.perf_counter
        self._start = self.clock()

    def restart(self) -> None:
        self._start = self.clock()

    def elapsed_ms(self) -> float:
        return round((self.clock() - self._start) * 1000, 2)
