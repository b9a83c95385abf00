"""Terminal message helpers for the FHIRSTARTER CLI.

Status lines go to stderr so stdout stays reserved for documents such as the
conformance statement. Emoji glyphs fall back to ASCII on terminals that
cannot encode them.
"""

import click

_GLYPHS = {
    "caution": ("⚠️", "[!]"),
    "success": ("✅", "[OK]"),
    "error": ("❌", "[X]"),
}


def _supports_character(character: str) -> bool:
    """Return True if ``character`` can be encoded on stderr."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def glyph(kind: str) -> str:
    """Marker for ``kind`` (``caution``, ``success`` or ``error``).

    Returns:
        str: The emoji when stderr can encode it, otherwise the ASCII fallback.

    Raises:
        KeyError: If ``kind`` is not a known marker.
    """
    emoji, fallback = _GLYPHS[kind]
    return emoji if _supports_character(emoji) else fallback


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to stderr.

    Example:
        ``⚠️  No interceptors registered.``
    """
    click.secho(f"{glyph('caution')}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to stderr.

    Example:
        ``✅  Server assembled.``
    """
    click.secho(f"{glyph('success')}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red, bold error line to stderr.

    Example:
        ``❌  Bootstrap failed.``
    """
    click.secho(f"{glyph('error')}  {msg}", fg="red", bold=True, err=True)
