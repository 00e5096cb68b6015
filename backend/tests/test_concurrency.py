import pytest

from cleaning_party.errors import StoreConflictError
from cleaning_party.store import MemorySessionStore


class InterleavingStore(MemorySessionStore):
    """Runs ``before_write`` once, right before the next write lands."""

    def __init__(self):
        super().__init__()
        self.before_write = None

    def _interleave(self):
        hook, self.before_write = self.before_write, None
        if hook:
            hook()

    def put(self, key, data):
        self._interleave()
        super().put(key, data)

    def put_if_version(self, key, data, expected_version):
        self._interleave()
        return super().put_if_version(key, data, expected_version)


class StaleStore(MemorySessionStore):
    def __init__(self):
        super().__init__()
        self.cas_attempts = 0

    def put_if_version(self, key, data, expected_version):
        self.cas_attempts += 1
        return False


def test_last_write_wins_loses_concurrent_join(make_engine):
    store = InterleavingStore()
    engine = make_engine(store=store)
    engine.join('ROOM', 'Alice')
    store.before_write = lambda: engine.join('ROOM', 'Carol')
    engine.join('ROOM', 'Bob')
    assert [p['name'] for p in engine.get_state('ROOM')['players']] == ['Alice', 'Bob']


def test_compare_and_swap_reapplies_join(make_engine):
    store = InterleavingStore()
    engine = make_engine(store=store, consistency='compare_and_swap')
    engine.join('ROOM', 'Alice')
    store.before_write = lambda: engine.join('ROOM', 'Carol')
    engine.join('ROOM', 'Bob')
    assert [p['name'] for p in engine.get_state('ROOM')['players']] == ['Alice', 'Carol', 'Bob']


def test_compare_and_swap_keeps_first_completion(make_engine):
    store = InterleavingStore()
    engine = make_engine(store=store, consistency='compare_and_swap')
    alice, _ = engine.join('ROOM', 'Alice')
    bob, _ = engine.join('ROOM', 'Bob')
    store.before_write = lambda: engine.complete_task('ROOM', bob, 'dishes')
    game = engine.complete_task('ROOM', alice, 'dishes')
    assert game.completed_tasks['dishes'].completed_by == bob
    assert {p.name: p.score for p in game.players} == {'Alice': 0, 'Bob': 15}


def test_compare_and_swap_gives_up_after_retries(make_engine):
    store = StaleStore()
    engine = make_engine(store=store, consistency='compare_and_swap', max_retries=3)
    with pytest.raises(StoreConflictError) as exc:
        engine.join('ROOM', 'Alice')
    assert exc.value.status_code == 409
    assert store.cas_attempts == 3
    assert store.get('game:ROOM') is None


def test_unknown_consistency_mode(make_engine):
    with pytest.raises(ValueError):
        make_engine(consistency='eventually')
