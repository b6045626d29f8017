"""Shared test helpers for Boostly."""

from sqlalchemy.exc import OperationalError

from boostly.session.core import SessionCore
from boostly.session.types import SessionType

START_MS = 1_700_000_000_000


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = START_MS):
        self.now = start_ms

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)

    def __call__(self) -> int:
        return self.now


class MemoryStore:
    """Dict-backed key-value store."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.writes = 0

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.writes += 1
        self.data[key] = value

    def remove(self, key):
        self.data.pop(key, None)


def _db_error() -> OperationalError:
    return OperationalError("UPDATE kv_store", {}, Exception("disk I/O error"))


class FailingStore(MemoryStore):
    """Store whose reads and/or writes raise like a broken database."""

    def __init__(self, *, fail_reads=False, fail_writes=True):
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def get(self, key):
        if self.fail_reads:
            raise _db_error()
        return super().get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise _db_error()
        super().set(key, value)


class QuotaStore(MemoryStore):
    """Store that rejects every write with a plain runtime error."""

    def set(self, key, value):
        raise RuntimeError("quota exceeded")

    def remove(self, key):
        raise RuntimeError("quota exceeded")


class EffectLog:
    """Records every call the engine makes to its collaborators."""

    POINTS = 7

    def __init__(self):
        self.rewards: list[tuple[SessionType, int]] = []
        self.notified: list = []
        self.synced: list = []

    def reward(self, session_type, duration_minutes):
        self.rewards.append((session_type, duration_minutes))
        return self.POINTS

    def notify(self, interval):
        self.notified.append(interval)

    def sync(self, awarded):
        self.synced.append(awarded)


def finish_interval(core: SessionCore, clock: FakeClock) -> None:
    """Jump the clock to the running interval's deadline and recompute."""
    clock.now = core.state.end_timestamp
    core.recompute_time_left()


def run_interval(core: SessionCore, clock: FakeClock) -> None:
    core.start()
    finish_interval(core, clock)
