"""
bread.config - REPL configuration loader

This module handles finding and parsing .breadrc files. The file is an
association list in Bread's own syntax, read with bread.reader:

    ((prompt . "bread> ")
     (banner . "Welcome to Bread Scheme!")
     (show-banner . true)
     (tidy-input . true)
     (show-traceback . false))

Entries may also be written as two-element lists, e.g. (prompt "bread> ").
Keys that are not recognised are kept in ReplConfig.extra.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Optional

from bread.reader import ReadError, read_all
from bread.runtime.types import Handle, Integer, Nil, Symbol, Text

DEFAULT_PROMPT = ">>> "
DEFAULT_BANNER = "Welcome to Bread Scheme!"
CONFIG_FILENAME = ".breadrc"


def handle_to_python(handle: Handle) -> Any:
    """
    Convert a Bread value to Python types for internal tooling use.

    - Nil -> []
    - proper list -> list
    - dotted list -> tuple of the elements followed by the tail
    - Integer -> int
    - Symbol, Text -> str
    """
    obj = handle.get()
    if isinstance(obj, Integer):
        return obj.value
    elif isinstance(obj, Symbol):
        return obj.text
    elif isinstance(obj, Text):
        return obj.value
    elif isinstance(obj, Nil):
        return []
    elif handle.is_pair():
        items = [handle_to_python(item) for item in handle.iter_list()]
        tail = handle.tail()
        if tail.is_nil():
            return items
        return tuple(items) + (handle_to_python(tail),)
    else:
        raise ValueError(f"cannot convert {type(obj).__name__} to a Python value")


def find_config_file(start_path: Optional[str] = None) -> Optional[str]:
    """
    Find a .breadrc by walking up from start_path (default: the working directory).

    Returns:
        Absolute path to the file, or None if not found.
    """
    if start_path is None:
        current = os.getcwd()
    elif os.path.isfile(start_path):
        current = os.path.dirname(os.path.abspath(start_path))
    else:
        current = os.path.abspath(start_path)

    while True:
        candidate = os.path.join(current, CONFIG_FILENAME)
        if os.path.isfile(candidate):
            return candidate

        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def _as_bool(key: str, value: Any) -> bool:
    if value in ("true", "yes", 1):
        return True
    if value in ("false", "no", 0):
        return False
    raise ValueError(f"{key} must be true or false, got {value!r}")


def _as_str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {type(value).__name__}")
    return value


@dataclass
class ReplConfig:
    """
    Settings for the interactive REPL.

    Fields:
        prompt: Printed before reading when no input is pending
        banner: Printed once at startup
        show_banner: Whether to print the banner
        tidy_input: Drop trailing spaces and one newline after each value
        show_traceback: Print Python tracebacks with error messages
        config_path: File the settings came from, None for defaults
        extra: Unrecognised entries from the file
    """

    prompt: str = DEFAULT_PROMPT
    banner: str = DEFAULT_BANNER
    show_banner: bool = True
    tidy_input: bool = True
    show_traceback: bool = False
    config_path: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "ReplConfig":
        """
        Load a ReplConfig from a .breadrc file.

        Args:
            path: Path to the file, a directory to search upward from, or
                  None to search from the working directory.

        Raises:
            FileNotFoundError: If no config file can be found.
            ValueError: If the file cannot be read or has invalid entries.
        """
        if path is None or os.path.isdir(path):
            config_file = find_config_file(path)
            if config_file is None:
                raise FileNotFoundError(
                    f"Could not find {CONFIG_FILENAME} in {path or 'current directory'} "
                    "or any parent directory"
                )
        elif os.path.isfile(path):
            config_file = os.path.abspath(path)
        else:
            raise FileNotFoundError(f"Path does not exist: {path}")

        with open(config_file, "rb") as f:
            content = f.read()

        try:
            forms = read_all(content)
        except ReadError as e:
            raise ValueError(f"Failed to parse {config_file}: {e}") from e

        if not forms:
            return cls(config_path=config_file)
        if len(forms) > 1:
            raise ValueError(f"{config_file} must contain a single association list")

        entries = handle_to_python(forms[0])
        if not isinstance(entries, list):
            raise ValueError(f"{config_file} must contain a list of (key . value) entries")

        settings: dict[str, Any] = {}
        for entry in entries:
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise ValueError(f"{config_file}: malformed entry {entry!r}")
            key, value = entry
            if not isinstance(key, str):
                raise ValueError(f"{config_file}: entry key must be a symbol, got {key!r}")
            settings[key] = value

        return cls.from_dict(settings, config_path=config_file)

    @classmethod
    def from_dict(
        cls, settings: dict[str, Any], config_path: Optional[str] = None
    ) -> "ReplConfig":
        """Build a config from key/value pairs using the file's key names."""
        config = cls(config_path=config_path)
        for key, value in settings.items():
            if key == "prompt":
                config.prompt = _as_str(key, value)
            elif key == "banner":
                config.banner = _as_str(key, value)
            elif key == "show-banner":
                config.show_banner = _as_bool(key, value)
            elif key == "tidy-input":
                config.tidy_input = _as_bool(key, value)
            elif key == "show-traceback":
                config.show_traceback = _as_bool(key, value)
            else:
                config.extra[key] = value
        return config


def load_config(path: Optional[str] = None) -> ReplConfig:
    """Load a ReplConfig, falling back to defaults when no file exists."""
    try:
        return ReplConfig.load(path)
    except FileNotFoundError:
        if path is not None and not os.path.isdir(path):
            raise
        return ReplConfig()


__all__ = [
    "ReplConfig",
    "load_config",
    "find_config_file",
    "handle_to_python",
    "CONFIG_FILENAME",
]
