"""Turn raw diagram text into a flat list of typed tokens.

The tokenizer is deliberately lenient: every non-blank, non-comment line is
tried against four patterns and produces at most one token. Lines that match
nothing are dropped silently here; :func:`~seqspec.validator.diagram.validate_diagram`
reports them separately.

Patterns, in priority order:

1. ``%%`` comment -- skipped.
2. Request -- ``A ->> B: GET /path optional summary``.
3. Response -- ``B -->> A: 200 optional description``.
4. Participant -- ``participant Name``.
5. Note -- ``Note over A,B: content``.
"""

from __future__ import annotations

import logging
import re

from seqspec.models import (
    HTTPMethod,
    NoteKind,
    NoteToken,
    ParticipantToken,
    RequestToken,
    ResponseToken,
    Token,
)

logger = logging.getLogger(__name__)

_METHODS = "|".join(m.value for m in HTTPMethod)

COMMENT_PATTERN = re.compile(r"^\s*%%")
REQUEST_PATTERN = re.compile(
    rf"^\s*([^-]+?)\s*->>\s*([^:]+?):\s?({_METHODS})\s+(\S+)(.*)", re.IGNORECASE
)
RESPONSE_PATTERN = re.compile(r"^\s*([^-]+?)\s*-->>\s*([^:]+?):\s?(\d{3})(.*)")
PARTICIPANT_PATTERN = re.compile(r"^\s*participant\s+(\S+)", re.IGNORECASE)
NOTE_PATTERN = re.compile(r"^\s*Note\s+over\s+([^:]+):\s*(.+)", re.IGNORECASE)


def tokenize(text: str) -> list[Token]:
    """Tokenize diagram *text*, one token per recognised line.

    Args:
        text: Raw diagram source. Line numbers in the returned tokens are
            1-based positions in this text.

    Returns:
        Tokens in source order.
    """
    tokens: list[Token] = []

    for index, line in enumerate(text.split("\n")):
        token = _tokenize_line(line.strip(), index + 1)
        if token is not None:
            tokens.append(token)

    logger.debug("Tokenized %d line(s) into %d token(s)", text.count("\n") + 1, len(tokens))
    return tokens


def _tokenize_line(line: str, line_no: int) -> Token | None:
    """Match a single stripped line against the token patterns."""
    if not line or COMMENT_PATTERN.match(line):
        return None

    match = REQUEST_PATTERN.match(line)
    if match:
        return RequestToken(
            line=line_no,
            source=match.group(1).strip(),
            target=match.group(2).strip(),
            method=HTTPMethod(match.group(3).lower()),
            path=match.group(4),
            summary=match.group(5).strip() or None,
        )

    match = RESPONSE_PATTERN.match(line)
    if match:
        return ResponseToken(
            line=line_no,
            source=match.group(1).strip(),
            target=match.group(2).strip(),
            status=match.group(3),
            description=match.group(4).strip() or None,
        )

    match = PARTICIPANT_PATTERN.match(line)
    if match:
        return ParticipantToken(line=line_no, name=match.group(1).strip())

    match = NOTE_PATTERN.match(line)
    if match:
        content = match.group(2).strip()
        return NoteToken(
            line=line_no,
            participants=tuple(p.strip() for p in match.group(1).split(",")),
            content=content,
            note_kind=NoteKind.BODY if content.lower().startswith("body:") else NoteKind.INFO,
        )

    return None
