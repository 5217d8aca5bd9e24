"""Tests for closable sources and wait_any."""

import queue
import threading

import pytest

from brigterm.streams import CLOSED
from brigterm.streams import Source
from brigterm.streams import wait_any


class TestSource:
    """Tests for Source."""

    def test_items_arrive_in_order_then_closed(self) -> None:
        source: Source[int] = Source()
        source.put(1)
        source.put(2)
        source.close()
        assert source.get_nowait() == 1
        assert source.get_nowait() == 2
        assert source.get_nowait() is CLOSED

    def test_put_after_close_is_dropped(self) -> None:
        source: Source[int] = Source()
        source.close()
        assert source.put(1) is False
        assert source.get_nowait() is CLOSED
        with pytest.raises(queue.Empty):
            source.get_nowait()

    def test_close_is_idempotent(self) -> None:
        source: Source[int] = Source()
        source.close()
        source.close()
        assert source.closed
        assert source.get_nowait() is CLOSED
        with pytest.raises(queue.Empty):
            source.get_nowait()

    def test_empty_source_raises(self) -> None:
        with pytest.raises(queue.Empty):
            Source().get_nowait()


class TestWaitAny:
    """Tests for wait_any."""

    def test_returns_ready_item_with_index(self) -> None:
        first: Source[str] = Source()
        second: Source[str] = Source()
        second.put("hello")
        assert wait_any([first, second], threading.Event()) == (1, "hello")

    def test_returns_closed_marker(self) -> None:
        source: Source[str] = Source()
        source.close()
        assert wait_any([source], threading.Event()) == (0, CLOSED)

    def test_skipped_source_is_not_polled(self) -> None:
        first: Source[str] = Source()
        second: Source[str] = Source()
        first.put("ignored")
        second.put("seen")
        assert wait_any([first, second], threading.Event(), skip=[True, False]) == (1, "seen")

    def test_start_index_sets_poll_order(self) -> None:
        first: Source[str] = Source()
        second: Source[str] = Source()
        first.put("a")
        second.put("b")
        assert wait_any([first, second], threading.Event(), start=1) == (1, "b")

    def test_cancel_returns_none(self) -> None:
        cancel = threading.Event()
        cancel.set()
        assert wait_any([Source()], cancel) is None

    def test_cancel_while_waiting(self) -> None:
        cancel = threading.Event()
        timer = threading.Timer(0.05, cancel.set)
        timer.start()
        try:
            assert wait_any([Source()], cancel, poll_interval=0.01) is None
        finally:
            timer.cancel()

    def test_item_arriving_later(self) -> None:
        source: Source[str] = Source()
        timer = threading.Timer(0.05, source.put, args=("late",))
        timer.start()
        try:
            assert wait_any([source], threading.Event(), poll_interval=0.01) == (0, "late")
        finally:
            timer.cancel()

    def test_all_skipped_raises(self) -> None:
        with pytest.raises(ValueError):
            wait_any([Source(), Source()], threading.Event(), skip=[True, True])

    def test_skip_length_mismatch_raises(self) -> None:
        with pytest.raises(ValueError):
            wait_any([Source(), Source()], threading.Event(), skip=[False])
