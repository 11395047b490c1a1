import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .config import (
    NAME_WEIGHT,
    DESCRIPTION_WEIGHT,
    PROPERTIES_WEIGHT,
    PHRASE_TIER_WEIGHT,
    ALL_TERMS_TIER_WEIGHT,
    ANY_TERMS_TIER_WEIGHT,
)
from .query import QueryForm, Tier, TieredQuery, tokenize


@dataclass(frozen=True)
class WeightedField:
    weight: float
    tokens: tuple[str, ...]


@dataclass(frozen=True)
class SearchDocument:
    """
    Searchable view of an item or location: name, description and the
    serialized property bag, each with its importance weight.
    """
    key: Any
    name: str
    fields: tuple[WeightedField, ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        key: Any,
        name: str,
        description: Optional[str] = None,
        properties: Optional[Mapping[str, str]] = None,
    ) -> "SearchDocument":
        fields = [
            WeightedField(NAME_WEIGHT, tuple(tokenize(name))),
            WeightedField(DESCRIPTION_WEIGHT, tuple(tokenize(description))),
        ]
        if properties is not None:
            serialized = json.dumps(dict(properties), ensure_ascii=False)
            fields.append(WeightedField(PROPERTIES_WEIGHT, tuple(tokenize(serialized))))
        return cls(key=key, name=name or "", fields=tuple(fields))

    def all_tokens(self) -> list[str]:
        tokens: list[str] = []
        for f in self.fields:
            tokens.extend(f.tokens)
        return tokens


@dataclass(frozen=True)
class Ranking:
    eligible: bool
    score: float = 0.0
    phrase: float = 0.0
    all_terms: float = 0.0
    any_terms: float = 0.0


def _matches_document(form: QueryForm, doc: SearchDocument) -> bool:
    # A phrase has to sit inside one field; term forms look at the whole document.
    if form.tier is Tier.PHRASE:
        return any(form.matches(f.tokens) for f in doc.fields)
    return form.matches(doc.all_tokens())


def _component(form: QueryForm, doc: SearchDocument) -> float:
    if not _matches_document(form, doc):
        return 0.0
    return sum(f.weight * form.coverage(f.tokens) for f in doc.fields)


def rank_document(query: TieredQuery, doc: SearchDocument) -> Ranking:
    """
    Score `doc` against the three tiers.

    Each tier component is a weighted sum over the document fields and is
    zero when the document does not match that tier. The document is
    eligible when at least one tier matches.
    """
    eligible = any(_matches_document(form, doc) for form in query.forms())
    if not eligible:
        return Ranking(eligible=False)

    phrase = _component(query.phrase, doc)
    all_terms = _component(query.all_terms, doc)
    any_terms = _component(query.any_terms, doc)
    score = (
        PHRASE_TIER_WEIGHT * phrase
        + ALL_TERMS_TIER_WEIGHT * all_terms
        + ANY_TERMS_TIER_WEIGHT * any_terms
    )
    return Ranking(eligible=True, score=score, phrase=phrase, all_terms=all_terms, any_terms=any_terms)


def ranking_sort_key(ranking: Ranking, doc: SearchDocument) -> tuple:
    """Descending score, then ascending name, then key for a total order."""
    return (-ranking.score, doc.name.lower(), doc.name, str(doc.key))
