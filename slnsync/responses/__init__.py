"""Response-file parsing and resolution."""

from .parser import ResponseFileParseError, parse_response_file, parse_response_text, tokenize
from .resolver import (
    OtherArguments,
    ResponseFileResolver,
    allow_unsafe,
    analyzer_paths,
    language_version,
    make_absolute,
    merge_other_arguments,
    ruleset_paths,
)

__all__ = [
    "OtherArguments",
    "ResponseFileParseError",
    "ResponseFileResolver",
    "allow_unsafe",
    "analyzer_paths",
    "language_version",
    "make_absolute",
    "merge_other_arguments",
    "parse_response_file",
    "parse_response_text",
    "ruleset_paths",
    "tokenize",
]
