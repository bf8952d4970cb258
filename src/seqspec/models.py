"""Canonical Pydantic models shared across all seqspec modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into four groups:

**Tokens** -- produced by :func:`~seqspec.parser.tokenizer.tokenize`, one per
recognised source line. The four variants form a closed union discriminated
on ``kind``:
    :class:`ParticipantToken`, :class:`RequestToken`, :class:`ResponseToken`,
    :class:`NoteToken`.

**Syntax tree** -- produced by :func:`~seqspec.parser.builder.parse` and
consumed by the document generator:
    :class:`Interaction`, :class:`ResponseInfo`, :class:`SecurityDescriptor`,
    :class:`ExternalDocs`, :class:`ParserNote`, and :class:`DiagramAST`.

**Diagnostics** -- the sole contract shared with presentation layers:
    :class:`ValidationError` and :class:`ValidationResult`.

**Configuration** -- :class:`GeneratorConfig`, serialised as JSON in the user
and project config files.

Generated OpenAPI documents are plain JSON-compatible dicts, not models, so
that they can be dumped and validated without conversion.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Tokens ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised on a request arrow.

    Values are lowercase so they can be used directly as OpenAPI path-item
    keys.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    PATCH = "patch"
    OPTIONS = "options"
    HEAD = "head"


class NoteKind(str, enum.Enum):
    """Whether a note carries a request/response body or free-form metadata."""

    BODY = "body"
    INFO = "info"


class ParticipantToken(BaseModel):
    """``participant <name>``"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["participant"] = "participant"
    line: int
    name: str


class RequestToken(BaseModel):
    """``<source> ->> <target>: <METHOD> <path> [summary]``"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["request"] = "request"
    line: int
    source: str
    target: str
    method: HTTPMethod
    path: str
    summary: Optional[str] = None


class ResponseToken(BaseModel):
    """``<source> -->> <target>: <status> [description]``"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["response"] = "response"
    line: int
    source: str
    target: str
    status: str
    description: Optional[str] = None


class NoteToken(BaseModel):
    """``Note over <p1,p2,...>: <content>``"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["note"] = "note"
    line: int
    participants: tuple[str, ...]
    content: str
    note_kind: NoteKind = NoteKind.INFO


Token = Annotated[
    Union[ParticipantToken, RequestToken, ResponseToken, NoteToken],
    Field(discriminator="kind"),
]
"""Any token emitted by the tokenizer."""


# --- Syntax tree ---


class SecurityKind(str, enum.Enum):
    """Authentication mechanisms recognised in ``Security:`` note lines."""

    BEARER = "bearer"
    BASIC = "basic"
    API_KEY = "apiKey"
    OAUTH2 = "oauth2"
    OPENID_CONNECT = "openIdConnect"
    CUSTOM = "custom"


class SecurityDescriptor(BaseModel):
    """One parsed ``Security:`` declaration.

    The :attr:`key` property yields the normalised descriptor string used as
    the security-scheme name in generated documents, e.g. ``bearerAuth``,
    ``apiKey_query`` or ``oauth2:read,write``. Unrecognised declarations are
    kept as :attr:`SecurityKind.CUSTOM` with the raw text as their key.
    """

    model_config = ConfigDict(frozen=True)

    kind: SecurityKind
    location: Optional[str] = None  # apiKey: header or query
    scopes: tuple[str, ...] = ()  # oauth2
    raw: str = ""

    @property
    def key(self) -> str:
        """The normalised descriptor string."""
        if self.kind == SecurityKind.BEARER:
            return "bearerAuth"
        if self.kind == SecurityKind.BASIC:
            return "basicAuth"
        if self.kind == SecurityKind.API_KEY:
            return f"apiKey_{self.location or 'header'}"
        if self.kind == SecurityKind.OAUTH2:
            if self.scopes:
                return "oauth2:" + ",".join(self.scopes)
            return "oauth2"
        if self.kind == SecurityKind.OPENID_CONNECT:
            return "openIdConnect"
        return self.raw


class ExternalDocs(BaseModel):
    """Link to documentation outside the generated document."""

    url: Optional[str] = None
    description: Optional[str] = None


class ResponseInfo(BaseModel):
    """The response paired with an :class:`Interaction`."""

    status: str
    description: Optional[str] = None


class Interaction(BaseModel):
    """One logical request, optionally paired with its response.

    Created by the parser from a :class:`RequestToken` and enriched in place
    while it remains the open interaction: a reciprocal response fills
    :attr:`response`, and attached notes fill the body, security and
    metadata fields.
    """

    source: str
    target: str
    method: HTTPMethod
    path: str
    line: int
    summary: Optional[str] = None
    description: Optional[str] = None
    response: Optional[ResponseInfo] = None
    body: Any = None
    security: list[SecurityDescriptor] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    operation_id: Optional[str] = None
    deprecated: bool = False
    external_docs: Optional[ExternalDocs] = None
    request_media_type: Optional[str] = None
    response_media_type: Optional[str] = None


class ParserNote(BaseModel):
    """A diagnostic recorded while building the syntax tree."""

    severity: Literal["error", "warning"]
    line: int
    message: str


class DiagramAST(BaseModel):
    """Complete parsed representation of a diagram.

    Attributes:
        participants: Every declared or used participant name.
        interactions: Requests in source order.
        notes: Diagnostics produced during parsing (orphaned responses,
            malformed body JSON).
    """

    participants: set[str] = Field(default_factory=set)
    interactions: list[Interaction] = Field(default_factory=list)
    notes: list[ParserNote] = Field(default_factory=list)


# --- Diagnostics ---


class DiagnosticSource(str, enum.Enum):
    """Which layer produced a diagnostic."""

    MERMAID = "mermaid"
    OPENAPI = "openapi"


class Severity(str, enum.Enum):
    """Diagnostic severity. Only ``error`` affects validity."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationError(BaseModel):
    """A single diagnostic from either validator.

    Not to be confused with :class:`pydantic.ValidationError`; this model is
    a plain data record and is never raised.
    """

    source: DiagnosticSource
    severity: Severity
    line: Optional[int] = None
    message: str
    suggestion: Optional[str] = None
    context: Optional[str] = None


class ValidationResult(BaseModel):
    """Aggregated diagnostics. ``valid`` is true iff ``errors`` is empty."""

    valid: bool
    errors: list[ValidationError] = Field(default_factory=list)
    warnings: list[ValidationError] = Field(default_factory=list)

    @classmethod
    def from_issues(
        cls,
        errors: list[ValidationError],
        warnings: list[ValidationError],
    ) -> ValidationResult:
        """Build a result, deriving ``valid`` from the error list."""
        return cls(valid=not errors, errors=errors, warnings=warnings)


# --- Configuration ---


class GeneratorConfig(BaseModel):
    """Settings that shape generated documents.

    Loaded by :func:`~seqspec.config.resolve_config` from the user config
    file, the project-local ``seqspec.json``, ``SEQSPEC_*`` environment
    variables and CLI flags. The generator itself only ever receives an
    explicit instance.
    """

    openapi_version: str = Field(
        default="3.0.0", description="Value of the top-level 'openapi' field"
    )
    api_version: str = Field(default="1.0.0", description="Value of 'info.version'")
    title_template: str = Field(
        default="{service} API", description="Template for 'info.title'"
    )
    request_media_type: str = Field(
        default="application/json",
        description="Request body media type when a note does not set one",
    )
    response_media_type: str = Field(
        default="application/json",
        description="Response media type when a note does not set one",
    )
    api_key_header: str = Field(
        default="X-API-Key", description="Parameter name for apiKey schemes"
    )
    oauth2_authorization_url: str = "https://example.com/oauth/authorize"
    openid_connect_url: str = "https://example.com/.well-known/openid-configuration"
    output_format: str = Field(
        default="yaml", description="Document output format: yaml or json"
    )
