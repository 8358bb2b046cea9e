#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/diff/token_diff.py
"""Token identity alignment between two extractions.

Tokens are compared solely by their text. Position plays no part in
matching; when a text occurs several times, which occurrence is reported
unchanged follows the tie-break of the shared sequence core and is stable
for identical inputs.
"""

from __future__ import annotations

from typing import Sequence

from pdfdelta.diff.sequence import align
from pdfdelta.models import Token, TokenChangeSet


def _token_text(token: Token) -> str:
    return token.text


def changed_indexes(tokens_a: Sequence[Token], tokens_b: Sequence[Token]) -> tuple[list[int], list[int]]:
    """Return ``(removed, added)`` absolute indexes in ascending order."""
    tokens_a = list(tokens_a)
    tokens_b = list(tokens_b)
    removed: list[int] = []
    added: list[int] = []
    for op in align(tokens_a, tokens_b, key=_token_text):
        if op.tag == "delete":
            removed.extend(token.absolute_index for token in tokens_a[op.old_range[0] : op.old_range[1]])
        elif op.tag == "insert":
            added.extend(token.absolute_index for token in tokens_b[op.new_range[0] : op.new_range[1]])
    return removed, added


def diff_tokens(tokens_a: Sequence[Token], tokens_b: Sequence[Token]) -> TokenChangeSet:
    """Align two token sequences and collect the changed indexes.

    Parameters
    ----------
    tokens_a : Sequence[Token]
        Tokens of the baseline document
    tokens_b : Sequence[Token]
        Tokens of the revised document

    Returns
    -------
    TokenChangeSet
        ``removed`` holds indexes into ``tokens_a`` and ``added`` indexes
        into ``tokens_b``; tokens in unchanged runs appear in neither.

    """
    removed, added = changed_indexes(tokens_a, tokens_b)
    return TokenChangeSet(removed=frozenset(removed), added=frozenset(added))
