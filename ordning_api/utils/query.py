"""
Free-text query handling shared by item and location search.

`sanitize_term` turns raw user input into plain words, `compile_query`
builds the three tiers (phrase, all-terms, any-terms) that the ranking
scores documents against.
"""
import re
import string
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

# Operator characters of the boolean/phrase query language: conjunction,
# disjunction, negation, grouping, quoting and the followed-by brackets.
RESERVED_CHARACTERS = "&|!()'\"<>"

_RESERVED_RE = re.compile("[" + re.escape(RESERVED_CHARACTERS) + "]")
_WHITESPACE_RE = re.compile(r"\s+")
_EDGE_PUNCTUATION = string.punctuation


def sanitize_term(term: Optional[str]) -> str:
    """
    Replace reserved operator characters with spaces and collapse whitespace.
    Returns "" for None/empty/whitespace input. Idempotent.
    """
    if not term:
        return ""
    clean = term.strip()
    clean = _RESERVED_RE.sub(" ", clean)
    clean = _WHITESPACE_RE.sub(" ", clean)
    return clean.strip()


def normalize_word(word: str) -> str:
    return word.strip(_EDGE_PUNCTUATION).lower()


def tokenize(text: Optional[str]) -> list[str]:
    """
    Split document text into normalized words, in order. Reserved characters
    split words the same way `sanitize_term` splits the query.
    """
    if not text:
        return []
    words = _RESERVED_RE.sub(" ", text).split()
    return [t for t in (normalize_word(w) for w in words) if t]


class Tier(str, Enum):
    PHRASE = "phrase"
    ALL_TERMS = "all"
    ANY_TERMS = "any"
    SINGLE_TERM = "single"


@dataclass(frozen=True)
class QueryForm:
    tier: Tier
    terms: tuple[str, ...]

    def matches(self, tokens: Sequence[str]) -> bool:
        if self.tier is Tier.PHRASE:
            return _contains_run(tokens, self.terms)
        present = set(tokens)
        if self.tier is Tier.ANY_TERMS:
            return any(t in present for t in self.terms)
        return all(t in present for t in self.terms)

    def coverage(self, tokens: Sequence[str]) -> float:
        """
        Share of this form's terms found in `tokens`. Phrase forms score
        all-or-nothing.
        """
        if not tokens:
            return 0.0
        if self.tier is Tier.PHRASE:
            return 1.0 if _contains_run(tokens, self.terms) else 0.0
        present = set(tokens)
        hits = sum(1 for t in self.terms if t in present)
        return hits / len(self.terms)

    def __str__(self) -> str:
        if self.tier is Tier.PHRASE:
            return '"' + " ".join(self.terms) + '"'
        if self.tier is Tier.ALL_TERMS:
            return " & ".join(self.terms)
        if self.tier is Tier.ANY_TERMS:
            return " | ".join(self.terms)
        return self.terms[0]


@dataclass(frozen=True)
class TieredQuery:
    words: tuple[str, ...]
    phrase: QueryForm
    all_terms: QueryForm
    any_terms: QueryForm

    def forms(self) -> tuple[QueryForm, QueryForm, QueryForm]:
        return self.phrase, self.all_terms, self.any_terms


def compile_query(sanitized: str) -> Optional[TieredQuery]:
    """
    Build phrase / all-terms / any-terms forms from a sanitized string.

    Returns None when no usable word remains (e.g. the input was only
    punctuation); callers treat that exactly like an empty search term.
    With a single word the all-terms and any-terms forms are the same
    single-term form.
    """
    words = tuple(w for w in (normalize_word(part) for part in sanitized.split(" ")) if w)
    if not words:
        return None

    phrase = QueryForm(Tier.PHRASE, words)
    if len(words) == 1:
        single = QueryForm(Tier.SINGLE_TERM, words)
        return TieredQuery(words=words, phrase=phrase, all_terms=single, any_terms=single)

    return TieredQuery(
        words=words,
        phrase=phrase,
        all_terms=QueryForm(Tier.ALL_TERMS, words),
        any_terms=QueryForm(Tier.ANY_TERMS, words),
    )


def _contains_run(tokens: Sequence[str], run: Iterable[str]) -> bool:
    run = tuple(run)
    size = len(run)
    if size == 0 or size > len(tokens):
        return False
    first = run[0]
    for start in range(len(tokens) - size + 1):
        if tokens[start] == first and tuple(tokens[start:start + size]) == run:
            return True
    return False
