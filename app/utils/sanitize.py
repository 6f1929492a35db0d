from typing import Any

import bleach


def strip_html(value: Any) -> Any:
    """Remove every HTML tag from ``value`` and keep the text content.

    Non-string values are returned unchanged so this can sit in front of any
    pydantic validator.
    """
    if not isinstance(value, str) or not value:
        return value
    cleaned = bleach.clean(value, tags=[], attributes={}, strip=True)
    # bleach escapes bare ampersands; angle brackets stay escaped
    return cleaned.replace("&amp;", "&").strip()
