"""Process helpers: clock, crash reporting to a chat and a heartbeat task."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
import threading
import time
import traceback
from collections.abc import Iterable
from datetime import timedelta

import httpx

logger = logging.getLogger(__name__)
panic_logger = logging.getLogger("panic_hook")

TELEGRAM_API_URL = "https://api.telegram.org"
TELEGRAM_BOT_TOKEN = ""

CHAT_MONEY_PRINTER = ""
CHAT_MONEY_PRINTER_THREAD_ERROR_REPORT = ""
CHAT_MONEY_PRINTER_THREAD_WALLET_WATCHER = ""
CHAT_MONEY_PRINTER_THREAD_TEST = ""
PERSONAL_CHAT_ID = ""

_REDACT_LONGER_THAN = 32
_MARKDOWN_SPECIAL = set("\\_*[]()~`>#+-=|{}.!")


def current_time_ms() -> int:
    return time.time_ns() // 1_000_000


def redact_cmdline(args: Iterable[str] | None = None) -> str:
    """Join command-line arguments, hiding long ones (such as private keys)."""
    if args is None:
        args = sys.argv
    return " ".join("[REDACTED]" if len(arg) > _REDACT_LONGER_THAN else arg for arg in args)


def format_panic_message(
    thread_name: str, message: str, filename: str | None = None, lineno: int | None = None
) -> str:
    if filename is None:
        return f"thread '{thread_name}' panicked at '{message}'"
    return f"thread '{thread_name}' panicked at '{message}': {filename}:{lineno}"


def escape_markdown(text: str) -> str:
    """Escape text for Telegram MarkdownV2."""
    return "".join(f"\\{ch}" if ch in _MARKDOWN_SPECIAL else ch for ch in text)


def send_panic_to_telegram(cmdline: str, message: str) -> bool:
    """Report a crash to the error-report chat; return True if it was delivered."""
    if not TELEGRAM_BOT_TOKEN or not CHAT_MONEY_PRINTER:
        logger.debug("telegram reporting not configured")
        return False

    text = escape_markdown(f"cmd: {json.dumps(cmdline)}\nerror: {json.dumps(message)}")
    payload = {
        "chat_id": CHAT_MONEY_PRINTER,
        "text": text,
        "parse_mode": "MarkdownV2",
        "disable_web_page_preview": True,
        "disable_notification": True,
    }
    if CHAT_MONEY_PRINTER_THREAD_ERROR_REPORT:
        payload["message_thread_id"] = CHAT_MONEY_PRINTER_THREAD_ERROR_REPORT

    url = f"{TELEGRAM_API_URL}/bot{TELEGRAM_BOT_TOKEN}/sendMessage"
    try:
        response = httpx.post(url, json=payload, timeout=10.0)
    except httpx.HTTPError as exc:
        logger.error("failed to send panic report: %s", exc)
        return False
    if response.status_code != 200:
        logger.error("panic report rejected: %s %s", response.status_code, response.text)
        return False
    return True


def _report(exc: BaseException, tb, thread_name: str) -> None:
    frames = traceback.extract_tb(tb) if tb is not None else []
    if frames:
        last = frames[-1]
        err_msg = format_panic_message(thread_name, str(exc), last.filename, last.lineno)
    else:
        err_msg = format_panic_message(thread_name, str(exc))
    send_panic_to_telegram(redact_cmdline(), err_msg)
    panic_logger.error(err_msg)


def set_panic_hook() -> None:
    """Report uncaught exceptions from any thread to the log and the chat."""

    def excepthook(exc_type, exc, tb) -> None:
        _report(exc, tb, threading.current_thread().name or "<unnamed>")

    def thread_excepthook(args: threading.ExceptHookArgs) -> None:
        name = args.thread.name if args.thread is not None else "<unnamed>"
        _report(args.exc_value, args.exc_traceback, name)

    sys.excepthook = excepthook
    threading.excepthook = thread_excepthook


async def _heartbeat_worker(service_id: str, interval: float) -> None:
    logger.info("Heartbeat worker started for %s", service_id)
    while True:
        await asyncio.sleep(interval)
        logger.debug("heartbeat: %s", service_id)


def start_heartbeat(service_id: str, interval: float | timedelta) -> asyncio.Task:
    """Start the heartbeat task on the running event loop."""
    seconds = interval.total_seconds() if isinstance(interval, timedelta) else float(interval)
    loop = asyncio.get_running_loop()
    return loop.create_task(_heartbeat_worker(str(service_id), seconds))