import pytest

from ordning_api.utils.query import compile_query, sanitize_term
from ordning_api.utils.ranking import SearchDocument, rank_document, ranking_sort_key


def _query(term: str):
    return compile_query(sanitize_term(term))


def test_phrase_in_name_beats_terms_split_across_fields():
    query = _query("hammer drill")
    full = SearchDocument.build("1", "Hammer Drill")
    split = SearchDocument.build("2", "Hammer", "Drill attachment")

    full_rank = rank_document(query, full)
    split_rank = rank_document(query, split)

    assert full_rank.eligible and split_rank.eligible
    assert full_rank.phrase > 0
    assert split_rank.phrase == 0.0
    assert full_rank.score > split_rank.score


def test_phrase_does_not_match_across_field_boundary():
    query = _query("hammer drill")
    doc = SearchDocument.build("1", "Hammer", "Drill attachment")
    ranking = rank_document(query, doc)
    assert ranking.phrase == 0.0
    assert ranking.all_terms > 0


def test_name_match_outweighs_description_and_properties():
    query = _query("walnut")
    in_name = SearchDocument.build("1", "Walnut box")
    in_description = SearchDocument.build("2", "Box", "made of walnut")
    in_properties = SearchDocument.build("3", "Box", None, {"wood": "walnut"})

    scores = [rank_document(query, d).score for d in (in_name, in_description, in_properties)]
    assert scores[0] > scores[1] > scores[2] > 0


def test_unmatched_document_is_ineligible_with_zero_components():
    query = _query("lantern")
    ranking = rank_document(query, SearchDocument.build("1", "Hammer", "steel", {"size": "m"}))
    assert not ranking.eligible
    assert ranking.score == 0.0
    assert ranking.phrase == 0.0
    assert ranking.all_terms == 0.0
    assert ranking.any_terms == 0.0


def test_tier_weights_combine_into_final_score():
    query = _query("red box")
    doc = SearchDocument.build("1", "red box")
    ranking = rank_document(query, doc)
    # Only the name field matches, at full coverage in every tier.
    assert ranking.phrase == pytest.approx(1.0)
    assert ranking.all_terms == pytest.approx(1.0)
    assert ranking.any_terms == pytest.approx(1.0)
    assert ranking.score == pytest.approx(3.0 + 2.0 + 1.0)


DOCUMENTS = [
    SearchDocument.build("1", "Hammer Drill"),
    SearchDocument.build("2", "Hammer", "Drill attachment"),
    SearchDocument.build("3", "Drill bits", None, {"size": "8mm"}),
    SearchDocument.build("4", "Screwdriver", "for hammer-free work"),
    SearchDocument.build("5", "Box", None, {"contents": "drill hammer"}),
    SearchDocument.build("6", "Garden hose"),
]


@pytest.mark.parametrize("term", ["hammer drill", "drill", "hammer box", "garden drill bits", "nothing here"])
def test_eligibility_is_monotonic_across_tiers(term):
    query = _query(term)
    for doc in DOCUMENTS:
        tokens = doc.all_tokens()
        phrase = any(query.phrase.matches(f.tokens) for f in doc.fields)
        all_terms = query.all_terms.matches(tokens)
        any_terms = query.any_terms.matches(tokens)

        if phrase:
            assert all_terms
        if all_terms:
            assert any_terms
        assert rank_document(query, doc).eligible == (phrase or all_terms or any_terms)


def test_sort_key_breaks_score_ties_by_name():
    query = _query("shelf")
    docs = [
        SearchDocument.build("b", "Shelf B"),
        SearchDocument.build("a", "Shelf A"),
        SearchDocument.build("c", "shelf c"),
    ]
    ordered = sorted(docs, key=lambda d: ranking_sort_key(rank_document(query, d), d))
    assert [d.name for d in ordered] == ["Shelf A", "Shelf B", "shelf c"]

    keys = {ranking_sort_key(rank_document(query, d), d) for d in docs}
    assert len(keys) == len(docs)
