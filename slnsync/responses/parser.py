"""Parsing of compiler response files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..models import ResponseFileData

_DEFINE_FLAGS = ("define", "d")
_REFERENCE_FLAGS = ("reference", "r")
_FLAG_PREFIXES = ("-", "/")


class ResponseFileParseError(ValueError):
    """Raised when a response file is malformed."""


def tokenize(text: str) -> List[str]:
    """Split response-file text into arguments, honouring double quotes."""
    tokens: List[str] = []
    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        current: List[str] = []
        in_quote = False
        has_token = False
        for char in line:
            if char == '"':
                in_quote = not in_quote
                has_token = True
                continue
            if char.isspace() and not in_quote:
                if has_token:
                    tokens.append("".join(current))
                    current = []
                    has_token = False
                continue
            current.append(char)
            has_token = True
        if in_quote:
            raise ResponseFileParseError(f"Unterminated quote on line {line_number}")
        if has_token:
            tokens.append("".join(current))
    return tokens


def parse_response_text(
    text: str,
    *,
    project_root: Path,
    system_dirs: Sequence[str] = (),
) -> ResponseFileData:
    """Parse response-file text; raises ``ResponseFileParseError`` on bad input."""
    data = ResponseFileData()
    for token in tokenize(text):
        flag = _flag_body(token)
        if flag is None:
            data.other_arguments.append(token)
            continue

        name, separator, value = flag.partition(":")
        lowered = name.lower()
        if lowered in _DEFINE_FLAGS and separator:
            data.defines.extend(_split_list(value, token))
        elif lowered in _REFERENCE_FLAGS and separator:
            for reference in _split_list(value, token):
                data.full_path_references.append(
                    _resolve_reference(reference, project_root, system_dirs)
                )
        elif lowered in {"unsafe", "unsafe+"}:
            data.unsafe = True
        elif lowered == "unsafe-":
            data.unsafe = False
        else:
            data.other_arguments.append(token)
    return data


def parse_response_file(
    path: Path,
    *,
    project_root: Path,
    system_dirs: Sequence[str] = (),
) -> ResponseFileData:
    """Read and parse ``path``; any problem yields data carrying only errors."""
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        return ResponseFileData(errors=[f"Unable to read response file: {exc}"])
    try:
        return parse_response_text(text, project_root=project_root, system_dirs=system_dirs)
    except ResponseFileParseError as exc:
        return ResponseFileData(errors=[str(exc)])


def _flag_body(token: str) -> Optional[str]:
    if len(token) > 1 and token[0] in _FLAG_PREFIXES:
        return token[1:]
    return None


def _split_list(value: str, token: str) -> List[str]:
    items = [item.strip() for item in value.replace(",", ";").split(";")]
    items = [item for item in items if item]
    if not items:
        raise ResponseFileParseError(f"Missing value for argument '{token}'")
    return items


def _resolve_reference(reference: str, project_root: Path, system_dirs: Iterable[str]) -> str:
    candidate = Path(reference)
    if candidate.is_absolute():
        if candidate.exists():
            return str(candidate)
        raise ResponseFileParseError(f"Reference file not found: {reference}")

    search_dirs = [project_root, *(Path(directory) for directory in system_dirs)]
    for directory in search_dirs:
        resolved = directory / candidate
        if resolved.exists():
            return os.path.normpath(str(resolved.resolve()))
    raise ResponseFileParseError(f"Reference file not found: {reference}")


__all__ = [
    "ResponseFileParseError",
    "parse_response_file",
    "parse_response_text",
    "tokenize",
]
