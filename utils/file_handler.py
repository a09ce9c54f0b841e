import os
from pathlib import Path

from app.errors import TextLoadError

DATA_DIR = "data"

_DEFAULT_FILE = Path("assets/texts/default.txt")

_FALLBACK = (
    "In the world of continuous typing, every keystroke matters. "
    "The art of combining reading and typing creates a unique learning experience "
    "that enhances both comprehension and muscle memory. As you progress through "
    "each chunk of text, your fingers learn the patterns while your mind absorbs "
    "the content.\n\n"
    "This synergy between reading and typing transforms the traditional approach "
    "to both activities. Load a chapter of your own with the button above, or keep "
    "practising on this passage until it feels effortless."
)


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def read_text_file(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            return normalize_newlines(f.read())
    except OSError as e:
        raise TextLoadError(path, e.strerror or str(e)) from e


def ensure_app_files():
    os.makedirs(DATA_DIR, exist_ok=True)


def chapter_title_from_path(path: str) -> str:
    return Path(path).stem.replace("_", " ").replace("-", " ").strip()


def load_default_text() -> str:
    try:
        if _DEFAULT_FILE.exists():
            return normalize_newlines(_DEFAULT_FILE.read_text(encoding="utf-8")).strip()
    except OSError:
        pass
    return _FALLBACK
