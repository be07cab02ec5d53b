import re

from django.conf import settings
from django.utils.html import strip_tags

from .exceptions import ValidationFailure

# C0 controls and DEL, except tab, newline and carriage return.
_CONTROL_CHARS = re.compile(r"[\x01-\x08\x0b\x0c\x0e-\x1f\x7f]")
_BLANK_RUNS = re.compile(r"\n{3,}")


def sanitize_observations(text) -> str:
    if text is None or not str(text).strip():
        return ""
    text = str(text)
    if "\x00" in text:
        raise ValidationFailure(["Observations contain null bytes"])
    max_length = getattr(settings, "CHANGE_REQUEST_OBSERVATIONS_MAX_LENGTH", 2000)
    if len(text) > max_length:
        raise ValidationFailure([f"Observations cannot exceed {max_length} characters"])
    text = strip_tags(_CONTROL_CHARS.sub("", text))
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return _BLANK_RUNS.sub("\n\n", text).strip()
