"""
Minimal title formatting for user command templates.

Syntax:
- ``%field%`` is replaced by the track's metadata value (case-insensitive
  name, empty when the track has no such field);
- ``%%`` is a literal percent sign;
- ``[ ... ]`` is an optional section, kept only if some field inside it
  produced a non-empty value.

Example: ``lyrics-fetch "%artist%" "%title%"[ --album "%album%"]``
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from lyricbar.player.track import Track

# Same bound as the buffer the command is read into.
MAX_OUTPUT_BYTES = 4096


class TitleFormatError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class _Literal:
    text: str


@dataclass(frozen=True, slots=True)
class _Field:
    name: str


@dataclass(frozen=True, slots=True)
class _Section:
    parts: tuple["_Part", ...]


_Part = Union[_Literal, _Field, _Section]


def _lookup(track: Track, name: str) -> str:
    value = track.find_meta(name)
    if value is None:
        for k, v in track.meta.items():
            if k.lower() == name:
                value = v
                break
    return value or ""


def _render(parts: tuple[_Part, ...], track: Track) -> tuple[str, bool]:
    out: list[str] = []
    resolved = False
    for part in parts:
        if isinstance(part, _Literal):
            out.append(part.text)
        elif isinstance(part, _Field):
            value = _lookup(track, part.name)
            resolved = resolved or bool(value)
            out.append(value)
        else:
            text, ok = _render(part.parts, track)
            if ok:
                out.append(text)
                resolved = True
    return "".join(out), resolved


class CompiledFormat:
    def __init__(self, source: str, parts: tuple[_Part, ...]):
        self.source = source
        self.parts = parts

    def evaluate(self, track: Track) -> str:
        with track.locked():
            text, _ = _render(self.parts, track)
        size = len(text.encode("utf-8"))
        if size >= MAX_OUTPUT_BYTES:
            raise TitleFormatError(f"formatted command is too long ({size} bytes)")
        return text

    def __repr__(self) -> str:
        return f"CompiledFormat({self.source!r})"


def _parse(src: str, pos: int, nested: bool) -> tuple[list[_Part], int]:
    parts: list[_Part] = []
    buf: list[str] = []

    def flush() -> None:
        if buf:
            parts.append(_Literal("".join(buf)))
            buf.clear()

    while pos < len(src):
        c = src[pos]
        if c == "%":
            end = src.find("%", pos + 1)
            if end < 0:
                raise TitleFormatError(f"unterminated field at column {pos}")
            if end == pos + 1:
                buf.append("%")
            else:
                name = src[pos + 1 : end].strip()
                if not name:
                    raise TitleFormatError(f"empty field name at column {pos}")
                flush()
                parts.append(_Field(name.lower()))
            pos = end + 1
        elif c == "[":
            flush()
            inner, pos = _parse(src, pos + 1, nested=True)
            parts.append(_Section(tuple(inner)))
        elif c == "]":
            if not nested:
                raise TitleFormatError(f"unbalanced ']' at column {pos}")
            flush()
            return parts, pos + 1
        else:
            buf.append(c)
            pos += 1

    if nested:
        raise TitleFormatError("unclosed '['")
    flush()
    return parts, pos


def compile_format(source: str) -> CompiledFormat:
    parts, _ = _parse(source, 0, nested=False)
    return CompiledFormat(source, tuple(parts))
