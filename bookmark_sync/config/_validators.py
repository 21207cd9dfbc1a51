from __future__ import annotations


def _ensure_api_key(value: str, *, name: str) -> str:
    if not value:
        msg = f"{name} API key is required"
        raise ValueError(msg)
    value = value.strip()
    if not value:
        msg = f"{name} API key is required"
        raise ValueError(msg)
    if len(value) > 500:
        msg = f"{name} API key appears to be too long"
        raise ValueError(msg)
    if any(char in value for char in [" ", "\n", "\t"]):
        msg = f"{name} API key contains invalid characters"
        raise ValueError(msg)
    return value


def _ensure_base_url(value: str, *, name: str) -> str:
    url = (value or "").strip()
    if not url:
        msg = f"{name} URL is required"
        raise ValueError(msg)
    if not url.startswith(("http://", "https://")):
        msg = f"{name} URL must start with http:// or https://"
        raise ValueError(msg)
    return url
