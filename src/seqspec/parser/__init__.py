"""Diagram parser -- tokenize notation text and build the syntax tree.

Typical usage::

    from seqspec.parser import parse_diagram

    ast = parse_diagram(text)
    for interaction in ast.interactions:
        print(interaction.method.value.upper(), interaction.path)

Sub-modules:

* :mod:`~seqspec.parser.tokenizer` -- line-oriented, lenient tokenizer.
* :mod:`~seqspec.parser.notes` -- body, security and metadata sub-grammars
  found inside notes.
* :mod:`~seqspec.parser.builder` -- request/response pairing and note
  attachment.
"""

from seqspec.parser.builder import parse, parse_diagram
from seqspec.parser.tokenizer import tokenize

__all__ = ["tokenize", "parse", "parse_diagram"]
