import threading

import pytest

from tictactoe.errors import SessionNotFound
from tictactoe.services.games.store import SessionStore
from tictactoe.services.games.variants import CLASSIC, GRAND, load_variants


@pytest.fixture()
def store():
    return SessionStore({'classic': CLASSIC, 'grand': GRAND}, 'classic')


def test_create_allocates_sequential_ids(store):
    first = store.create()
    second = store.create('grand')
    assert (first.id, second.id) == (1, 2)
    assert first.variant is CLASSIC
    assert len(second.board) == 25
    assert store.ids() == [1, 2]
    assert len(store) == 2


def test_unknown_variant_raises_key_error(store):
    with pytest.raises(KeyError):
        store.create('hexagonal')
    assert len(store) == 0


def test_get_returns_private_copy(store):
    session_id = store.create().id
    copy = store.get(session_id)
    copy.apply_move(0)
    assert store.get(session_id).board[0] is None


def test_get_unknown_is_none(store):
    assert store.get(42) is None
    assert store.snapshot(42) is None


def test_replace_persists_transition(store):
    session_id = store.create().id
    session = store.get(session_id)
    session.apply_move(4)
    assert store.replace(session_id, session) is session
    assert store.get(session_id).board[4] == 0
    assert store.snapshot(session_id)['currentPlayerIndex'] == 1


def test_replace_unknown_id_is_silent(store):
    session = store.create()
    assert store.replace(99, session) is None
    assert store.ids() == [session.id]


def test_locked_unknown_id_raises(store):
    with pytest.raises(SessionNotFound):
        with store.locked(5):
            pass


def test_locks_are_per_session(store):
    a = store.create().id
    b = store.create().id
    entered = threading.Event()

    def other_session():
        with store.locked(b):
            entered.set()

    with store.locked(a):
        worker = threading.Thread(target=other_session)
        worker.start()
        # a held lock on one session never blocks another session
        assert entered.wait(timeout=2)
        worker.join(timeout=2)


def test_concurrent_creates_get_unique_ids(store):
    created = []
    lock = threading.Lock()

    def worker():
        for _ in range(25):
            session = store.create()
            with lock:
                created.append(session.id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sorted(created) == list(range(1, 201))


def test_load_variants_adds_custom_from_config():
    variants = load_variants({'BOARD_SIZE': 4, 'WIN_LENGTH': 3, 'PLAYER_COUNT': 3, 'DEFAULT_VARIANT': 'custom'})
    custom = variants['custom']
    assert (custom.board_size, custom.win_length, custom.players) == (4, 3, 3)
    assert set(variants) == {'classic', 'grand', 'custom'}


def test_load_variants_rejects_unknown_default():
    with pytest.raises(ValueError):
        load_variants({'DEFAULT_VARIANT': 'custom'})


@pytest.mark.parametrize('config', [{'WIN_LENGTH': 4}, {'PLAYER_COUNT': 3}])
def test_load_variants_rejects_custom_settings_without_board_size(config):
    with pytest.raises(ValueError):
        load_variants(config)
