"""OSC-8 hyperlinks for the FHIRSTARTER CLI.

Server base addresses and documentation links are rendered as clickable links
on terminals known to support OSC-8, and as plain URLs everywhere else
(pipes, redirects, unknown terminals).
"""

import os
import sys
from typing import TextIO

_OSC8_PROGRAMS = {"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty"}


def supports_osc8(stream: TextIO | None = None) -> bool:
    """Heuristically detect whether ``stream`` renders OSC-8 hyperlinks.

    Args:
        stream: Text stream to check; defaults to ``sys.stdout``.

    Returns:
        bool: False for non-TTY streams; otherwise True only for terminals on a
        conservative allowlist (``TERM_PROGRAM``, Windows Terminal, VTE based
        terminals, Alacritty and Konsole).
    """
    stream = stream or sys.stdout
    if not getattr(stream, "isatty", lambda: False)():
        return False
    terminal_program = (os.getenv("TERM_PROGRAM") or "").lower()
    return bool(
        terminal_program in _OSC8_PROGRAMS
        or os.getenv("WT_SESSION")
        or os.getenv("VTE_VERSION")
        or os.getenv("TERM", "").startswith(("alacritty", "konsole"))
    )


def hyperlink(url: str, label: str | None = None) -> str:
    """Render ``url`` as an OSC-8 hyperlink, or as plain text when unsupported.

    Args:
        url: Target URL.
        label: Visible text; defaults to the URL itself. Ignored in the plain
            text fallback so the URL is never lost.

    Returns:
        str: The escaped hyperlink, or ``url`` unchanged.
    """
    if not supports_osc8():
        return url
    return f"\x1b]8;;{url}\x07{label or url}\x1b]8;;\x07"
