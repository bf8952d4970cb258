"""Strict syntax checks for diagram text.

Unlike the lenient tokenizer, which silently drops anything it does not
recognise, :func:`validate_diagram` reports every suspicious line. It works
directly on the raw text in two passes:

1. **Line pass** -- classify each non-blank, non-comment line, flagging
   unrecognised lines, unknown HTTP methods, malformed path templates, bad
   status codes and bad participant names.
2. **Cross-reference pass** -- over the classified lines in order, flag
   undeclared participants, responses with no pending reciprocal request,
   notes that precede every request, and body notes whose JSON is invalid.

Every problem is collected; validation never stops early.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Optional, Union

from seqspec.models import (
    DiagnosticSource,
    HTTPMethod,
    Severity,
    ValidationError,
    ValidationResult,
)

REQUEST_PATTERN = re.compile(r"^\s*([^-]+?)\s*->>\s*([^:]+?):\s?([A-Za-z]+)\s+(\S+)(.*)")
RESPONSE_PATTERN = re.compile(r"^\s*([^-]+?)\s*-->>\s*([^:]+?):\s?(\d{3})(.*)")
PARTICIPANT_PATTERN = re.compile(r"^\s*participant\s+(\S+)", re.IGNORECASE)
EMPTY_PARTICIPANT_PATTERN = re.compile(r"^\s*participant\s*$", re.IGNORECASE)
NOTE_PATTERN = re.compile(r"^\s*Note\s+over\s+([^:]+):\s*(.+)", re.IGNORECASE)

_PARTICIPANT_NAME = re.compile(r"^[\w-]+$")
_BODY_JSON = re.compile(r"Body:\s*(.+)", re.IGNORECASE | re.DOTALL)

VALID_METHODS = tuple(m.value.upper() for m in HTTPMethod)


@dataclass
class _Participant:
    line: int
    name: str


@dataclass
class _Request:
    line: int
    source: str
    target: str


@dataclass
class _Response:
    line: int
    source: str
    target: str


@dataclass
class _Note:
    line: int
    participants: list[str]
    content: str


_Record = Union[_Participant, _Request, _Response, _Note]


def _issue(
    severity: Severity,
    message: str,
    line: Optional[int] = None,
    suggestion: Optional[str] = None,
    context: Optional[str] = None,
) -> ValidationError:
    return ValidationError(
        source=DiagnosticSource.MERMAID,
        severity=severity,
        line=line,
        message=message,
        suggestion=suggestion,
        context=context,
    )


def validate_diagram(text: str) -> ValidationResult:
    """Validate diagram *text*.

    Args:
        text: Raw diagram source.

    Returns:
        A :class:`~seqspec.models.ValidationResult`; ``valid`` is ``False``
        whenever at least one error was found. Warnings never affect
        validity.

    Example::

        result = validate_diagram("User->>API: FETCH /users")
        result.errors[0].message  # 'Invalid HTTP method: "FETCH"'
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []

    if not text or not text.strip():
        errors.append(
            _issue(
                Severity.ERROR,
                "Empty input",
                suggestion="Provide a sequence diagram with at least one request",
            )
        )
        return ValidationResult.from_issues(errors, warnings)

    records: list[_Record] = []
    for index, raw in enumerate(text.split("\n")):
        line = raw.strip()
        if not line or line.startswith("%%"):
            continue
        record = _check_line(line, index + 1, errors, warnings)
        if record is not None:
            records.append(record)

    _cross_reference(records, errors, warnings)
    return ValidationResult.from_issues(errors, warnings)


def _check_line(
    line: str,
    line_no: int,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> Optional[_Record]:
    """First pass: classify one line and report line-local problems."""
    if EMPTY_PARTICIPANT_PATTERN.match(line):
        errors.append(
            _issue(
                Severity.ERROR,
                "Empty participant name",
                line=line_no,
                suggestion="Provide a valid participant name",
            )
        )
        return None

    match = REQUEST_PATTERN.match(line)
    if match:
        method = match.group(3)
        if method.upper() not in VALID_METHODS:
            errors.append(
                _issue(
                    Severity.ERROR,
                    f'Invalid HTTP method: "{method}"',
                    line=line_no,
                    suggestion=f"Use one of: {', '.join(VALID_METHODS)}",
                    context=method,
                )
            )
        errors.extend(validate_path(match.group(4), line_no))
        return _Request(line_no, match.group(1).strip(), match.group(2).strip())

    match = RESPONSE_PATTERN.match(line)
    if match:
        status = int(match.group(3))
        if not 100 <= status <= 599:
            errors.append(
                _issue(
                    Severity.ERROR,
                    f'Invalid HTTP status code: "{match.group(3)}"',
                    line=line_no,
                    suggestion="Use a status code between 100 and 599",
                    context=match.group(3),
                )
            )
        return _Response(line_no, match.group(1).strip(), match.group(2).strip())

    match = PARTICIPANT_PATTERN.match(line)
    if match:
        name = match.group(1).strip()
        _check_participant_name(name, line_no, errors, warnings)
        return _Participant(line_no, name)

    match = NOTE_PATTERN.match(line)
    if match:
        participants = [p.strip() for p in match.group(1).split(",")]
        return _Note(line_no, participants, match.group(2).strip())

    warnings.append(
        _issue(
            Severity.WARNING,
            "Line does not match any known pattern",
            line=line_no,
            suggestion="Check the syntax for requests, responses, participants, or notes",
            context=line,
        )
    )
    return None


def _check_participant_name(
    name: str,
    line_no: int,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    if not _PARTICIPANT_NAME.match(name):
        errors.append(
            _issue(
                Severity.ERROR,
                f'Invalid character in participant name: "{name}"',
                line=line_no,
                suggestion="Use only letters, digits, underscores and hyphens",
                context=name,
            )
        )
    if name[:1].isdigit():
        warnings.append(
            _issue(
                Severity.WARNING,
                f'Participant name starts with a number: "{name}"',
                line=line_no,
                suggestion="Consider starting with a letter",
                context=name,
            )
        )


def validate_path(path: str, line_no: int) -> list[ValidationError]:
    """Check the path template of a request line.

    Only the part before ``?`` is inspected. Flags doubled braces, unmatched
    opening or closing braces, and parameter groups with nothing between
    them (``/{a}{b}``).
    """
    errors: list[ValidationError] = []
    template = path.split("?", 1)[0]

    if "{{" in template:
        errors.append(
            _issue(
                Severity.ERROR,
                "Double braces detected in path",
                line=line_no,
                suggestion="Use single braces for path parameters: /users/{id}",
                context=path,
            )
        )

    depth = 0
    unmatched_close = False
    for char in template:
        if char == "{":
            depth += 1
        elif char == "}":
            if depth == 0:
                unmatched_close = True
                break
            depth -= 1
    if depth or unmatched_close:
        errors.append(
            _issue(
                Severity.ERROR,
                "Unmatched brace in path",
                line=line_no,
                suggestion="Ensure every opening brace has a closing brace",
                context=path,
            )
        )

    if "}{" in template:
        errors.append(
            _issue(
                Severity.ERROR,
                "Adjacent path parameters detected",
                line=line_no,
                suggestion="Separate path parameters with a slash: /users/{id}/{name}",
                context=path,
            )
        )

    return errors


def _cross_reference(
    records: list[_Record],
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    """Second pass: checks that depend on the whole diagram."""
    declared = {r.name for r in records if isinstance(r, _Participant)}
    pending: list[_Request] = []
    seen_request = False

    for record in records:
        if isinstance(record, _Request):
            seen_request = True
            pending.append(record)
            for role, name in (("source", record.source), ("target", record.target)):
                if name not in declared:
                    errors.append(
                        _issue(
                            Severity.ERROR,
                            f'Unknown {role} participant: "{name}"',
                            line=record.line,
                            suggestion=f'Declare the participant first using "participant {name}"',
                            context=name,
                        )
                    )

        elif isinstance(record, _Response):
            _close_pending(record, pending, errors)

        elif isinstance(record, _Note):
            for name in record.participants:
                if name not in declared:
                    warnings.append(
                        _issue(
                            Severity.WARNING,
                            f'Note references undefined participant: "{name}"',
                            line=record.line,
                            suggestion=f'Declare the participant first using "participant {name}"',
                            context=name,
                        )
                    )
            if not seen_request:
                warnings.append(
                    _issue(
                        Severity.WARNING,
                        "Note may be orphaned - no preceding request found",
                        line=record.line,
                        suggestion="Place notes after the request they describe",
                        context=record.content,
                    )
                )
            if record.content.lower().startswith("body:"):
                errors.extend(_check_body_json(record))


def _close_pending(
    response: _Response, pending: list[_Request], errors: list[ValidationError]
) -> None:
    """Pair *response* with the latest pending reciprocal request."""
    for index in range(len(pending) - 1, -1, -1):
        request = pending[index]
        if request.source == response.target and request.target == response.source:
            del pending[index]
            return

    errors.append(
        _issue(
            Severity.ERROR,
            "Orphaned response - no matching request found",
            line=response.line,
            suggestion=(
                f"Ensure there is a request from {response.target} to "
                f"{response.source} before this response"
            ),
            context=f"{response.source} -> {response.target}",
        )
    )


def _check_body_json(note: _Note) -> list[ValidationError]:
    match = _BODY_JSON.search(note.content)
    if match is None:
        return []
    payload = match.group(1).strip()
    try:
        json.loads(payload)
    except (ValueError, RecursionError) as exc:
        return [
            _issue(
                Severity.ERROR,
                f"Invalid JSON in body note: {exc}",
                line=note.line,
                suggestion="Ensure JSON is properly formatted with matching braces and quotes",
                context=payload,
            )
        ]
    return []
