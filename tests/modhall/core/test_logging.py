import json
import logging

from modhall.core.logging import getLogContext, logContext
from modhall.core.logging.filters import RecurringSuppressFilter
from modhall.core.logging.formatters import DevFormatter, JsonFormatter


def _record(msg, *args, name="modhall.test", level=logging.WARNING):
    return logging.LogRecord(name, level, __file__, 1, msg, args, None)


def test_log_context_is_scoped():
    assert getLogContext() is None
    with logContext(op="apply", profileId="pvp"):
        with logContext(worldId="w1", profileId=None):
            assert getLogContext() == {"op": "apply", "profileId": "pvp", "worldId": "w1"}
        assert getLogContext() == {"op": "apply", "profileId": "pvp"}
    assert getLogContext() is None


def test_dev_formatter_renders_context():
    with logContext(op="apply", profileId="pvp"):
        line = DevFormatter().format(_record("Moved %d", 3))
    assert line == "WARNING: [modhall.test] Moved 3 [apply/pvp]"


def test_json_formatter_emits_one_object():
    with logContext(op="scan"):
        payload = json.loads(JsonFormatter().format(_record("hello %s", "world")))
    assert payload["msg"] == "hello world"
    assert payload["level"] == "warning"
    assert payload["ctx"] == {"op": "scan"}


def test_recurring_filter_drops_after_limit():
    suppress = RecurringSuppressFilter(windowSeconds=60, maxPerWindow=2)
    results = [suppress.filter(_record("same thing")) for _ in range(4)]
    assert results == [True, True, False, False]
    assert suppress.filter(_record("different thing")) is True


def test_recurring_filter_lets_marked_records_through():
    suppress = RecurringSuppressFilter(windowSeconds=60, maxPerWindow=1)
    record = _record("summary")
    record._noRecurringSuppress = True
    assert all(suppress.filter(record) for _ in range(3))
