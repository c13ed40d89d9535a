import asyncio
import logging
import sys
import threading
import time
from datetime import timedelta
from unittest import mock

import pytest

from mevkit import runtime


def test_current_time_ms_is_current():
    before = int(time.time() * 1000)
    now = runtime.current_time_ms()
    after = int(time.time() * 1000)
    assert before - 1 <= now <= after + 1


def test_redact_cmdline_hides_long_arguments():
    long_arg = "k" * 33
    exact = "e" * 32
    assert runtime.redact_cmdline(["prog", long_arg, exact, "-v"]) == f"prog [REDACTED] {exact} -v"


def test_format_panic_message_with_location():
    msg = runtime.format_panic_message("main", "boom", "src/x.py", 12)
    assert msg == "thread 'main' panicked at 'boom': src/x.py:12"


def test_format_panic_message_without_location():
    assert runtime.format_panic_message("worker", "boom") == "thread 'worker' panicked at 'boom'"


def test_escape_markdown_escapes_specials():
    assert runtime.escape_markdown("a.b") == "a\\.b"
    assert runtime.escape_markdown("plain") == "plain"
    specials = "_*[]()~`>#+-=|{}.!"
    escaped = runtime.escape_markdown(specials)
    assert len(escaped) == 2 * len(specials)
    assert escaped[1::2] == specials


def test_send_panic_skipped_without_configuration():
    assert runtime.send_panic_to_telegram("prog", "boom") is False


def test_send_panic_posts_message(monkeypatch):
    monkeypatch.setattr(runtime, "TELEGRAM_BOT_TOKEN", "token")
    monkeypatch.setattr(runtime, "CHAT_MONEY_PRINTER", "42")
    monkeypatch.setattr(runtime, "CHAT_MONEY_PRINTER_THREAD_ERROR_REPORT", "7")
    response = mock.Mock(status_code=200, text="ok")
    with mock.patch("httpx.post", return_value=response) as post:
        assert runtime.send_panic_to_telegram("prog", "boom") is True
    url = post.call_args.args[0]
    payload = post.call_args.kwargs["json"]
    assert url.endswith("/bottoken/sendMessage")
    assert payload["chat_id"] == "42"
    assert payload["message_thread_id"] == "7"
    assert payload["disable_notification"] is True
    assert "boom" in payload["text"]


def test_send_panic_reports_rejection(monkeypatch):
    monkeypatch.setattr(runtime, "TELEGRAM_BOT_TOKEN", "token")
    monkeypatch.setattr(runtime, "CHAT_MONEY_PRINTER", "42")
    response = mock.Mock(status_code=400, text="bad")
    with mock.patch("httpx.post", return_value=response):
        assert runtime.send_panic_to_telegram("prog", "boom") is False


def test_panic_hook_logs_uncaught_exception(caplog):
    old_hook, old_thread_hook = sys.excepthook, threading.excepthook
    try:
        runtime.set_panic_hook()
        assert sys.excepthook is not old_hook
        try:
            raise RuntimeError("kaboom")
        except RuntimeError as exc:
            with caplog.at_level(logging.ERROR, logger="panic_hook"):
                sys.excepthook(type(exc), exc, exc.__traceback__)
    finally:
        sys.excepthook, threading.excepthook = old_hook, old_thread_hook
    messages = [r.getMessage() for r in caplog.records if r.name == "panic_hook"]
    assert len(messages) == 1
    assert "panicked at 'kaboom'" in messages[0]
    assert "test_runtime.py" in messages[0]


def test_thread_panic_hook_names_thread(caplog):
    old_hook, old_thread_hook = sys.excepthook, threading.excepthook
    try:
        runtime.set_panic_hook()

        def fail():
            raise ValueError("thread failure")

        worker = threading.Thread(target=fail, name="update-thread")
        with caplog.at_level(logging.ERROR, logger="panic_hook"):
            worker.start()
            worker.join()
    finally:
        sys.excepthook, threading.excepthook = old_hook, old_thread_hook
    messages = [r.getMessage() for r in caplog.records if r.name == "panic_hook"]
    assert any(m.startswith("thread 'update-thread' panicked at 'thread failure'") for m in messages)


@pytest.mark.asyncio
async def test_start_heartbeat_runs_until_cancelled(caplog):
    with caplog.at_level(logging.INFO, logger="mevkit.runtime"):
        task = runtime.start_heartbeat("svc", timedelta(milliseconds=10))
        await asyncio.sleep(0.05)
        assert not task.done()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
    assert any(r.getMessage() == "Heartbeat worker started for svc" for r in caplog.records)


def test_start_heartbeat_requires_running_loop():
    with pytest.raises(RuntimeError):
        runtime.start_heartbeat("svc", 1.0)