import re
from typing import Any

# Regex patterns for common secrets
SECRET_PATTERNS = [
    r"(\"__conduit__\"\s*:\s*\{\s*\"token\"\s*:\s*\")([^\"]+)",
    r"(api\.token\s*[:=]\s*)(['\"]?[a-zA-Z0-9\-\._~+/=]+['\"]?)",
    r"(cli-[a-z0-9]{4})([a-z0-9]{24})",
    r"(Authorization:\s*)([a-zA-Z0-9\-\._~+/=]+)",
]

SENSITIVE_KEYS = {
    "__conduit__",
    "authorization",
    "token",
    "password",
    "secret",
}


def redact_text(text: str) -> str:
    """
    Redacts secrets from a string using regex patterns.
    """
    if not text:
        return text

    redacted_text = text
    for pattern in SECRET_PATTERNS:
        # Regex structure assumes (prefix)(secret)
        redacted_text = re.sub(pattern, r"\1[REDACTED]", redacted_text, flags=re.IGNORECASE)
    return redacted_text


def redact_value(value: Any) -> Any:
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, dict):
        return redact_dict(value)
    if isinstance(value, list):
        return [redact_value(item) for item in value]
    return value


def redact_dict(obj: dict[str, Any]) -> dict[str, Any]:
    """
    Redacts sensitive keys and values in a dictionary (recursive).
    """
    new_obj = {}
    for k, v in obj.items():
        key_lower = str(k).lower()
        if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
            new_obj[k] = "[REDACTED]"
        else:
            new_obj[k] = redact_value(v)
    return new_obj
