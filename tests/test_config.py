import pytest

from cgutils.config import (
    DEFAULT_THREAD_SIZE,
    MAX_TASK_STEAL_RANGE,
    MAX_THREAD_SIZE,
    ThreadPoolConfig,
)


def test_default_config_sizes():
    config = ThreadPoolConfig()
    assert config.default_thread_size == 8
    assert config.max_thread_size == config.default_thread_size * 2 + 1
    assert config.secondary_thread_size == 0
    assert config.monitor_enable is False


def test_default_steal_range_is_configured_range():
    assert ThreadPoolConfig().calc_steal_range() == MAX_TASK_STEAL_RANGE


@pytest.mark.parametrize("threads", [1, 2, 3])
def test_steal_range_limited_by_thread_count(threads):
    config = ThreadPoolConfig(default_thread_size=threads)
    assert config.calc_steal_range() == min(MAX_TASK_STEAL_RANGE, threads - 1)
    assert config.calc_steal_range() <= threads - 1


def test_steal_range_follows_configured_range():
    config = ThreadPoolConfig(default_thread_size=DEFAULT_THREAD_SIZE, max_task_steal_range=5)
    assert config.calc_steal_range() == 5


def test_configs_are_independent():
    first = ThreadPoolConfig()
    second = ThreadPoolConfig(max_thread_size=4)
    assert first.max_thread_size == MAX_THREAD_SIZE
    assert second.max_thread_size == 4
    assert first != second