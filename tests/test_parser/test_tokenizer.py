"""Tests for seqspec.parser.tokenizer."""

from __future__ import annotations

import pytest

from seqspec.models import (
    HTTPMethod,
    NoteKind,
    NoteToken,
    ParticipantToken,
    RequestToken,
    ResponseToken,
)
from seqspec.parser.tokenizer import tokenize


# ---------------------------------------------------------------------------
# Individual line kinds
# ---------------------------------------------------------------------------


class TestTokenKinds:
    """Each recognised line produces exactly one token of the right kind."""

    def test_participant(self) -> None:
        [token] = tokenize("participant API")
        assert isinstance(token, ParticipantToken)
        assert token.name == "API"
        assert token.line == 1

    def test_request_with_summary(self) -> None:
        [token] = tokenize("User->>API: GET /users List all users")
        assert isinstance(token, RequestToken)
        assert token.source == "User"
        assert token.target == "API"
        assert token.method == HTTPMethod.GET
        assert token.path == "/users"
        assert token.summary == "List all users"

    def test_request_without_summary(self) -> None:
        [token] = tokenize("User ->> API: DELETE /users/{id}")
        assert isinstance(token, RequestToken)
        assert token.target == "API"
        assert token.summary is None

    @pytest.mark.parametrize("method", ["get", "Post", "PUT", "patch", "OPTIONS", "head"])
    def test_request_method_is_case_insensitive(self, method: str) -> None:
        [token] = tokenize(f"A->>B: {method} /x")
        assert isinstance(token, RequestToken)
        assert token.method.value == method.lower()

    def test_response(self) -> None:
        [token] = tokenize("API-->>User: 404 Not Found")
        assert isinstance(token, ResponseToken)
        assert token.source == "API"
        assert token.target == "User"
        assert token.status == "404"
        assert token.description == "Not Found"

    def test_response_without_description(self) -> None:
        [token] = tokenize("API-->>User: 204")
        assert isinstance(token, ResponseToken)
        assert token.description is None

    def test_note_participants_and_content(self) -> None:
        [token] = tokenize("Note over User, API: Security: bearerAuth")
        assert isinstance(token, NoteToken)
        assert token.participants == ("User", "API")
        assert token.content == "Security: bearerAuth"
        assert token.note_kind == NoteKind.INFO

    def test_body_note_kind(self) -> None:
        [token] = tokenize('Note over API: body: {"a": 1}')
        assert isinstance(token, NoteToken)
        assert token.note_kind == NoteKind.BODY


# ---------------------------------------------------------------------------
# Skipped lines
# ---------------------------------------------------------------------------


class TestSkippedLines:
    """Comments, blanks and unknown lines produce no token."""

    def test_comment_is_skipped(self) -> None:
        assert tokenize("%% User->>API: GET /users") == []

    def test_blank_lines_are_skipped(self) -> None:
        assert tokenize("\n   \n\t\n") == []

    def test_unknown_method_is_dropped(self) -> None:
        assert tokenize("User->>API: FETCH /users") == []

    def test_header_line_is_dropped(self) -> None:
        assert tokenize("sequenceDiagram") == []

    def test_line_numbers_are_source_positions(self) -> None:
        text = "sequenceDiagram\n\n%% comment\nUser->>API: GET /a\nAPI-->>User: 200"
        tokens = tokenize(text)
        assert [t.line for t in tokens] == [4, 5]

    def test_tokens_keep_source_order(self, basic_diagram: str) -> None:
        kinds = [t.kind for t in tokenize(basic_diagram)]
        assert kinds == ["participant", "participant", "request", "response"]
