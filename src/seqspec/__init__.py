"""seqspec -- Turn HTTP sequence diagrams into OpenAPI 3.0 documents.

This package reads a lightweight Mermaid-style sequence-diagram notation
(participants, request arrows, response arrows and annotation notes) and
produces one OpenAPI 3.0 document per target service. Both the source notation
and the generated documents can be checked for structural problems.

Typical workflow::

    seqspec validate checkout.mmd          # strict notation diagnostics
    seqspec generate checkout.mmd -d out/  # one document per service
    seqspec check out/Payments.yaml        # structural OpenAPI checks

Modules:
    app: Typer application and CLI entry point.
    commands: generate, validate, check and config sub-commands.
    loader: Read diagram text and OpenAPI documents from files, URLs or stdin.
    models: Pydantic models shared across the entire package.
    parser: Tokenizer and AST builder for the diagram notation.
    generator: Schema inference and OpenAPI document generation.
    validator: Diagnostics for diagram text and OpenAPI documents.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
