import sys
from pathlib import Path


LIGHT_BLUE = "\033[94m"
RESET = "\033[0m"

_quiet = False


def format_path_for_console(path: Path, root: Path | None = None) -> str:
    """
    Render a path with the unpack root stripped (if provided) and
    wrapped in a light-blue ANSI color for console output.
    """
    resolved = path.resolve()
    display = resolved.as_posix()
    if root:
        try:
            rel = resolved.relative_to(root.resolve())
            display = "/" + rel.as_posix()
        except ValueError:
            display = resolved.as_posix()
    return f"{LIGHT_BLUE}{display}{RESET}"


def set_quiet(quiet: bool) -> None:
    global _quiet
    _quiet = quiet


def log(tag: str, message: str) -> None:
    """Print a `[tag] message` line; `[info]` lines are dropped in quiet mode."""
    if _quiet and tag == "info":
        return
    stream = sys.stderr if tag in ("warn", "fail") else sys.stdout
    print(f"[{tag}] {message}", file=stream)
