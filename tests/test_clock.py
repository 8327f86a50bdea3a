import time

import pytest

from pgpsession import clock

TEST_TIME = 1557754627


@pytest.fixture(autouse=True)
def fresh_clock():
    clock._reset()
    yield
    clock._reset()


def test_time_uses_latest_server_time():
    clock.update_time(1571072494)
    assert clock.get_unix_time() == 1571072494
    clock.update_time(TEST_TIME)
    # An older time never replaces a newer one.
    assert clock.get_unix_time() == 1571072494


def test_update_time_moves_forward():
    clock.update_time(TEST_TIME)
    clock.update_time(TEST_TIME + 10)
    assert clock.get_unix_time() == TEST_TIME + 10


def test_without_server_time_uses_local_clock():
    before = int(time.time())
    now = clock.get_unix_time()
    after = int(time.time())
    assert before <= now <= after


def test_get_time_matches_unix_time():
    clock.update_time(TEST_TIME)
    assert int(clock.get_time().timestamp()) == TEST_TIME
    assert clock.get_time().utcoffset().total_seconds() == 0


def test_key_generation_time_applies_offset():
    clock.update_time(TEST_TIME)
    clock.set_key_generation_offset(-3600)
    assert int(clock.key_generation_time().timestamp()) == TEST_TIME - 3600
    assert clock.get_unix_time() == TEST_TIME


def test_key_generation_time_without_server_time():
    clock.set_key_generation_offset(100)
    before = int(time.time())
    generated = int(clock.key_generation_time().timestamp())
    after = int(time.time())
    assert before + 100 <= generated <= after + 100