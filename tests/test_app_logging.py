from __future__ import annotations

import logging

from app import _MaskingFormatter


def _record(msg: str, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord("judgebot", logging.ERROR, __file__, 1, msg, None, exc_info)


def test_secrets_are_masked_in_message_and_traceback() -> None:
    formatter = _MaskingFormatter(["123:ABC", "", "ABC"])
    try:
        raise RuntimeError("token 123:ABC rejected")
    except RuntimeError as exc:
        record = _record("login with 123:ABC failed", (type(exc), exc, exc.__traceback__))

    rendered = formatter.format(record)

    assert "ABC" not in rendered
    assert "login with *** failed" in rendered
    assert "token *** rejected" in rendered


def test_no_secrets_leaves_message_alone() -> None:
    assert _MaskingFormatter([]).format(_record("plain")).endswith("judgebot: plain")
