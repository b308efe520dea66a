import pytest


class FakeTick:
    def __init__(self, delay_ms, callback):
        self.delay_ms = delay_ms
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True
        return True


class ManualScheduler:
    """Scheduler stand-in: ticks only fire when the test says so."""

    def __init__(self):
        self.ticks = []

    def schedule(self, delay_ms, callback):
        tick = FakeTick(delay_ms, callback)
        self.ticks.append(tick)
        return tick

    @property
    def pending(self):
        return [t for t in self.ticks if not t.cancelled and not t.fired]

    def fire_next(self):
        tick = self.pending[0]
        tick.fired = True
        tick.callback()
        return tick

    def run_until_idle(self, limit=1000):
        fired = 0
        while self.pending and fired < limit:
            self.fire_next()
            fired += 1
        return fired


@pytest.fixture
def scheduler():
    return ManualScheduler()
