"""Build a :class:`~seqspec.models.DiagramAST` from tokens.

The builder walks tokens once, in order, carrying a single piece of mutable
state: the *open* interaction, i.e. the most recent request that has not yet
been answered.

* A request opens a new interaction (and registers both endpoints as
  participants, declared or not).
* A response pairs with the open interaction only when it travels in the
  exact reverse direction. Pairing closes the interaction; anything else is
  recorded as an orphaned response and leaves the open interaction alone.
* A note enriches the open interaction when its participant list includes
  the interaction's target. Body, security and metadata are parsed
  independently so that a malformed body never hides a security line.

Malformed input never raises; it becomes a :class:`~seqspec.models.ParserNote`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from seqspec.models import (
    DiagramAST,
    Interaction,
    NoteToken,
    ParserNote,
    ParticipantToken,
    RequestToken,
    ResponseInfo,
    ResponseToken,
    Token,
)
from seqspec.parser.notes import extract_body, parse_metadata, parse_security
from seqspec.parser.tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass
class _ParseState:
    """Working state for a single :func:`parse` call."""

    participants: set[str] = field(default_factory=set)
    interactions: list[Interaction] = field(default_factory=list)
    notes: list[ParserNote] = field(default_factory=list)
    open_request: Optional[Interaction] = None


def parse(tokens: list[Token]) -> DiagramAST:
    """Build the syntax tree for a token sequence.

    Args:
        tokens: Output of :func:`~seqspec.parser.tokenizer.tokenize`.

    Returns:
        The participants, interactions and parser diagnostics.
    """
    state = _ParseState()

    for token in tokens:
        if isinstance(token, ParticipantToken):
            state.participants.add(token.name)

    for token in tokens:
        if isinstance(token, RequestToken):
            _on_request(state, token)
        elif isinstance(token, ResponseToken):
            _on_response(state, token)
        elif isinstance(token, NoteToken):
            _on_note(state, token)

    logger.debug(
        "Parsed %d interaction(s) across %d participant(s), %d note(s)",
        len(state.interactions),
        len(state.participants),
        len(state.notes),
    )
    return DiagramAST(
        participants=state.participants,
        interactions=state.interactions,
        notes=state.notes,
    )


def parse_diagram(text: str) -> DiagramAST:
    """Tokenize and parse diagram *text* in one step."""
    return parse(tokenize(text))


def _on_request(state: _ParseState, token: RequestToken) -> None:
    interaction = Interaction(
        source=token.source,
        target=token.target,
        method=token.method,
        path=token.path,
        line=token.line,
        summary=token.summary,
    )
    state.participants.add(token.source)
    state.participants.add(token.target)
    state.interactions.append(interaction)
    state.open_request = interaction


def _on_response(state: _ParseState, token: ResponseToken) -> None:
    request = state.open_request
    if request is not None and request.target == token.source and request.source == token.target:
        request.response = ResponseInfo(status=token.status, description=token.description)
        state.open_request = None
        return

    logger.debug("Orphaned response at line %d", token.line)
    state.notes.append(
        ParserNote(
            severity="warning",
            line=token.line,
            message=(
                f"orphaned response from {token.source} to {token.target} "
                f"at line {token.line}"
            ),
        )
    )


def _on_note(state: _ParseState, token: NoteToken) -> None:
    request = state.open_request
    if request is None or request.target not in token.participants or not token.content:
        return

    try:
        found, body = extract_body(token.content)
    except (ValueError, RecursionError):
        state.notes.append(
            ParserNote(
                severity="error",
                line=token.line,
                message=f"Invalid JSON in body note at line {token.line}: {token.content}",
            )
        )
    else:
        if found:
            request.body = body

    request.security.extend(parse_security(token.content))

    for name, value in parse_metadata(token.content).items():
        setattr(request, name, value)
