import threading

from conftest import make_state, make_trade
from trades.locks import trade_write_lock
from trades.rules import build_trade_context


def test_trade_write_lock_is_reentrant() -> None:
    with trade_write_lock(reason="outer"):
        with trade_write_lock(reason="inner"):
            pass


def test_trade_write_lock_serializes_threads() -> None:
    entered = threading.Event()
    order = []

    def writer() -> None:
        with trade_write_lock(reason="second"):
            order.append("second")
        entered.set()

    with trade_write_lock(reason="first"):
        t = threading.Thread(target=writer)
        t.start()
        assert not entered.wait(0.1)
        order.append("first")
    t.join(timeout=5)
    assert order == ["first", "second"]


def test_trade_context_reuses_given_ownership() -> None:
    state = make_state(trades=[make_trade("t1", "2026-01-01T00:00:00Z", "A", "B", (2026, 1, "A"))])
    given = {(2026, 1, "A"): "C"}
    ctx = build_trade_context(state, ownership=given)
    assert ctx.ownership == given
    assert ctx.ownership is not given

    replayed = build_trade_context(state)
    assert replayed.ownership[(2026, 1, "A")] == "B"
    assert (2026, 1, "A") in replayed.base_keys
    assert replayed.rule_setting("stepien_round") == 1
