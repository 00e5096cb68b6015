import pytest

from cleaning_party import db
from cleaning_party.errors import StoreError
from cleaning_party.models import GameRecord
from cleaning_party.store import MemorySessionStore, SqlSessionStore


@pytest.fixture(params=['memory', 'sql'])
def any_store(request):
    if request.param == 'memory':
        return MemorySessionStore()
    request.getfixturevalue('flask_app')
    return SqlSessionStore(db)


def test_missing_key(any_store):
    assert any_store.get('game:NONE') is None
    assert any_store.get_versioned('game:NONE') == (None, None)


def test_put_overwrites_and_bumps_version(any_store):
    any_store.put('game:A', '{"v": 1}')
    any_store.put('game:A', '{"v": 2}')
    assert any_store.get_versioned('game:A') == ('{"v": 2}', 2)


def test_put_if_version(any_store):
    assert any_store.put_if_version('game:A', 'first', None)
    assert not any_store.put_if_version('game:A', 'again', None)
    assert not any_store.put_if_version('game:A', 'stale', 7)
    assert any_store.put_if_version('game:A', 'second', 1)
    assert any_store.get_versioned('game:A') == ('second', 2)


def test_delete(any_store):
    any_store.put('game:A', 'x')
    assert any_store.delete('game:A')
    assert not any_store.delete('game:A')
    assert any_store.get('game:A') is None


def test_sql_record_serializes(flask_app):
    SqlSessionStore(db).put('game:A', '{}')
    record = db.session.get(GameRecord, 'game:A')
    assert record.to_dict()['version'] == 1
    assert record.to_dict()['key'] == 'game:A'


def test_sql_failure_becomes_store_error(flask_app):
    store = SqlSessionStore(db)
    db.drop_all()
    with pytest.raises(StoreError) as exc:
        store.get('game:A')
    assert exc.value.status_code == 500
    with pytest.raises(StoreError):
        store.put('game:A', '{}')
