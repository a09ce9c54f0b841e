# app/errors.py


class TypereaderError(Exception):
    """Base class for errors raised by the surrounding application."""


class ConfigError(TypereaderError, ValueError):
    pass


class DatabaseError(TypereaderError):
    pass


class TextLoadError(TypereaderError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
