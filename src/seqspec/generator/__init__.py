"""OpenAPI generation -- schema inference and per-service documents.

Typical usage::

    from seqspec.generator import generate_specs
    from seqspec.parser import parse_diagram

    documents = generate_specs(parse_diagram(text))

Sub-modules:

* :mod:`~seqspec.generator.schema` -- JSON value to schema inference,
  including the explicit field-rule language.
* :mod:`~seqspec.generator.components` -- structural fingerprints and
  shared-component extraction.
* :mod:`~seqspec.generator.security` -- security descriptor to Security
  Scheme Object mapping.
* :mod:`~seqspec.generator.openapi` -- the two-pass document generator.
"""

from seqspec.generator.components import fingerprint
from seqspec.generator.openapi import generate_specs
from seqspec.generator.schema import generate_object, infer_one, infer_schema

__all__ = ["generate_specs", "generate_object", "infer_one", "infer_schema", "fingerprint"]
