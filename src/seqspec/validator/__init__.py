"""Validators -- diagnostics for diagram text and OpenAPI documents.

Typical usage::

    from seqspec.validator import validate_diagram, validate_documents

    notation = validate_diagram(text)
    documents = validate_documents(generate_specs(parse_diagram(text)))

Sub-modules:

* :mod:`~seqspec.validator.diagram` -- strict line-oriented notation checks.
* :mod:`~seqspec.validator.document` -- structural OpenAPI checks, single
  document and multi-service.
* :mod:`~seqspec.validator.references` -- ``$ref`` integrity and cycle
  detection.
"""

from seqspec.validator.diagram import validate_diagram
from seqspec.validator.document import validate_document, validate_documents, validate_openapi

__all__ = ["validate_diagram", "validate_document", "validate_documents", "validate_openapi"]
