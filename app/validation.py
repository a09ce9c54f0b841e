from app.errors import ConfigError


def positive_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def sanitize_title(title: str) -> str:
    cleaned = " ".join((title or "").split())
    return cleaned[:120] or "Untitled chapter"
