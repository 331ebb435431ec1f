"""Unit tests for the settle_all combinator."""

import asyncio

from orderedit.application.settle import settle_all


async def _value(v, delay=0.0):
    await asyncio.sleep(delay)
    return v


async def _boom(message):
    await asyncio.sleep(0)
    raise RuntimeError(message)


def test_one_failure_does_not_cancel_the_others():
    results = asyncio.run(
        settle_all([("a", _value(1, 0.01)), ("b", _boom("nope")), ("c", _value(3))])
    )

    assert [r.key for r in results] == ["a", "b", "c"]
    assert [r.ok for r in results] == [True, False, True]
    assert results[0].value == 1
    assert results[2].value == 3
    assert str(results[1].error) == "nope"


def test_results_keep_submission_order_regardless_of_timing():
    results = asyncio.run(
        settle_all([("slow", _value("s", 0.02)), ("fast", _value("f"))])
    )
    assert [r.value for r in results] == ["s", "f"]


def test_empty_batch():
    assert asyncio.run(settle_all([])) == []
