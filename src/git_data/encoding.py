import base64
import re
from typing import Union

_NOT_BASE64 = re.compile(r"[^A-Z0-9+/=]", re.IGNORECASE)


def is_base64(value: Union[str, bytes]) -> bool:
    """Checks whether a value already looks like standard base64 text.

    Bytes are inspected as UTF-8 text; bytes that don't decode are never base64.
    """
    if isinstance(value, bytes):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError:
            return False
    if not isinstance(value, str):
        raise TypeError(f"Expected str or bytes but received {type(value).__name__}")

    length = len(value)
    if not length or length % 4 != 0 or _NOT_BASE64.search(value):
        return False

    first_padding = value.find("=")
    return (
        first_padding == -1
        or first_padding == length - 1
        or (first_padding == length - 2 and value[-1] == "=")
    )


def to_base64(contents: Union[str, bytes]) -> str:
    """Returns blob content ready for submission, encoding it at most once."""
    if is_base64(contents):
        return contents.decode("utf-8") if isinstance(contents, bytes) else contents
    raw = contents.encode("utf-8") if isinstance(contents, str) else contents
    return base64.b64encode(raw).decode("ascii")
