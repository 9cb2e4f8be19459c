"""
SmartNotes Backend — Search Filter Tests
==========================================
"""

from types import SimpleNamespace

import pytest

from smartnotes.services.search import filter_notes, note_matches


def note(title, summary=None, keywords=None):
    return SimpleNamespace(title=title, summary=summary, keywords=keywords)


NOTES = [
    note("Physics Lecture", "Newton's laws", ["mechanics"]),
    note("Grocery list", None, ["food", "Weekly"]),
    note("Team sync", "Budget for Q3", []),
    note("Reading", "A novel about the sea", None),
]


class TestFilterNotes:

    def test_empty_query_returns_everything_in_order(self):
        assert filter_notes(NOTES, "") == NOTES
        assert filter_notes(NOTES, None) == NOTES

    def test_matches_title_case_insensitively(self):
        assert filter_notes(NOTES, "PHYSICS") == [NOTES[0]]

    def test_matches_summary(self):
        assert filter_notes(NOTES, "budget") == [NOTES[2]]

    def test_matches_keyword_substring(self):
        assert filter_notes(NOTES, "week") == [NOTES[1]]

    def test_null_summary_and_keywords_do_not_fail(self):
        assert filter_notes(NOTES, "novel") == [NOTES[3]]

    def test_no_match_returns_empty_list(self):
        assert filter_notes(NOTES, "zebra") == []

    def test_preserves_original_order(self):
        notes = [note("b alpha"), note("a alpha"), note("c beta"), note("d alpha")]
        assert filter_notes(notes, "alpha") == [notes[0], notes[1], notes[3]]

    def test_does_not_mutate_input(self):
        notes = list(NOTES)
        filter_notes(notes, "physics")
        assert notes == NOTES

    @pytest.mark.parametrize(
        "upper, lower",
        [("PHYSICS", "physics"), ("bUdGeT", "budget"), ("WEEK", "week"), ("NEWTON'S", "newton's"), ("A", "a")],
    )
    def test_query_case_does_not_matter(self, upper, lower):
        assert filter_notes(NOTES, upper) == filter_notes(NOTES, lower)

    @pytest.mark.parametrize("query", ["lecture", "laws", "mechanics", "food", "q3", "e", "zebra"])
    def test_result_is_an_ordered_subset(self, query):
        result = filter_notes(NOTES, query)
        assert all(n in NOTES for n in result)
        assert result == [n for n in NOTES if n in result]
        assert all(note_matches(n, query) for n in result)


class TestNoteMatches:

    def test_each_field_on_its_own(self):
        assert note_matches(note("Alpha"), "alp")
        assert note_matches(note("x", summary="Alpha"), "alp")
        assert note_matches(note("x", keywords=["Alpha"]), "alp")
        assert not note_matches(note("x", summary="y", keywords=["z"]), "alp")
