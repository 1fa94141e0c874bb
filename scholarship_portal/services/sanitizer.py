import re
import html
import logging
from datetime import datetime
from typing import Dict, Mapping, Optional

import nh3

logger = logging.getLogger(__name__)

CAPTCHA_FIELD = "captcha-answer"
DATE_FIELD = "dob"
MISSING_VALUE = "N/A"

_WORD_START = re.compile(r"\b\w")
_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%d-%m-%Y", "%d/%m/%Y")


# Strips every tag and attribute from a raw form value, keeping only the (escaped) text.
# Entities are decoded first so that cleaning an already-clean value is a no-op.
def sanitize_value(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    return nh3.clean(html.unescape(str(raw)), tags=set(), attributes={})


# Capitalizes the first letter of each word without touching the rest
def capitalize_words(text: str) -> str:
    return _WORD_START.sub(lambda m: m.group(0).upper(), text)


# Converts a machine field name such as "email_id" into a label such as "Email Id"
def humanize_key(key: str) -> str:
    return capitalize_words(key.replace("_", " "))


# Parses a calendar date and renders it as DD-MM-YYYY, or N/A when it cannot be read
def format_date(raw: Optional[str]) -> str:
    if not raw or not raw.strip():
        return MISSING_VALUE
    value = raw.strip()

    try:
        return datetime.fromisoformat(value).strftime("%d-%m-%Y")
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).strftime("%d-%m-%Y")
        except ValueError:
            continue

    logger.debug(f"Unparseable date value: {value!r}")
    return MISSING_VALUE


def sanitize_form(fields: Mapping[str, Optional[str]]) -> Dict[str, str]:
    """Sanitize an inbound form, preserving field order.

    The CAPTCHA answer is dropped and ``dob`` is normalized to DD-MM-YYYY.
    Empty values stay empty strings; only ``dob`` degrades to ``N/A``.
    """
    sanitized: Dict[str, str] = {}
    for key, raw in fields.items():
        if key == CAPTCHA_FIELD:
            continue
        value = sanitize_value(raw)
        if key == DATE_FIELD:
            value = format_date(value)
        sanitized[key] = value
    return sanitized


def humanize_details(details: Mapping[str, str]) -> Dict[str, str]:
    """Display projection: humanized labels, empty values shown as N/A."""
    return {humanize_key(key): (value or MISSING_VALUE) for key, value in details.items()}
