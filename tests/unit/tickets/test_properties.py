"""Unit tests for Notion property extractors."""

import pytest

from shipyard.tickets.properties import (
    extract_date,
    extract_multi_select,
    extract_person_ids,
    extract_plain_text,
    extract_relation_ids,
    extract_select,
    extract_url,
)


@pytest.mark.unit
class TestExtractPlainText:
    """Tests for extract_plain_text."""

    def test_concatenates_title_spans(self) -> None:
        """Title spans are joined in order."""
        prop = {"type": "title", "title": [{"plain_text": "Fix "}, {"plain_text": "login"}]}
        assert extract_plain_text(prop) == "Fix login"

    def test_reads_rich_text(self) -> None:
        prop = {"type": "rich_text", "rich_text": [{"plain_text": "feature/x"}]}
        assert extract_plain_text(prop) == "feature/x"

    def test_empty_spans_is_none(self) -> None:
        """No spans yields None, not an empty string."""
        assert extract_plain_text({"type": "rich_text", "rich_text": []}) is None

    def test_wrong_type_is_none(self) -> None:
        assert extract_plain_text({"type": "select", "select": {"name": "x"}}) is None

    @pytest.mark.parametrize("prop", [None, "text", 42, [], {"title": []}])
    def test_malformed_input_is_none(self, prop) -> None:
        """Malformed properties never raise."""
        assert extract_plain_text(prop) is None

    def test_skips_malformed_spans(self) -> None:
        prop = {"type": "title", "title": [None, {"plain_text": "ok"}, {"text": "x"}]}
        assert extract_plain_text(prop) == "ok"


@pytest.mark.unit
class TestExtractSelect:
    """Tests for extract_select."""

    def test_reads_status_shape(self) -> None:
        assert extract_select({"type": "status", "status": {"name": "Done"}}) == "Done"

    def test_reads_select_shape(self) -> None:
        assert extract_select({"type": "select", "select": {"name": "P1"}}) == "P1"

    def test_unset_select_is_none(self) -> None:
        assert extract_select({"type": "select", "select": None}) is None

    def test_missing_property_is_none(self) -> None:
        assert extract_select(None) is None


@pytest.mark.unit
class TestExtractMultiSelect:
    """Tests for extract_multi_select."""

    def test_reads_names_in_order(self) -> None:
        prop = {
            "type": "multi_select",
            "multi_select": [{"name": "Frontend"}, {"name": "Backend"}],
        }
        assert extract_multi_select(prop) == ["Frontend", "Backend"]

    def test_select_reads_as_single_value(self) -> None:
        """A property converted to select still yields a list."""
        assert extract_multi_select({"type": "select", "select": {"name": "Docs"}}) == ["Docs"]

    def test_unset_select_is_empty(self) -> None:
        assert extract_multi_select({"type": "select", "select": None}) == []

    def test_malformed_is_empty(self) -> None:
        assert extract_multi_select({"type": "multi_select", "multi_select": "Docs"}) == []
        assert extract_multi_select(None) == []


@pytest.mark.unit
class TestScalarExtractors:
    """Tests for url and date extractors."""

    def test_url(self) -> None:
        assert extract_url({"type": "url", "url": "https://x.test/spec"}) == "https://x.test/spec"

    def test_empty_url_is_none(self) -> None:
        assert extract_url({"type": "url", "url": ""}) is None
        assert extract_url({"type": "url", "url": None}) is None

    def test_date_start(self) -> None:
        prop = {"type": "date", "date": {"start": "2026-02-01", "end": None}}
        assert extract_date(prop) == "2026-02-01"

    def test_unset_date_is_none(self) -> None:
        assert extract_date({"type": "date", "date": None}) is None


@pytest.mark.unit
class TestIdExtractors:
    """Tests for relation and people extractors."""

    def test_relation_ids_keep_order(self) -> None:
        prop = {"type": "relation", "relation": [{"id": "b"}, {"id": "a"}]}
        assert extract_relation_ids(prop) == ["b", "a"]

    def test_relation_skips_entries_without_id(self) -> None:
        prop = {"type": "relation", "relation": [{"id": "a"}, {}, "junk"]}
        assert extract_relation_ids(prop) == ["a"]

    def test_person_ids(self) -> None:
        prop = {"type": "people", "people": [{"object": "user", "id": "user-1"}]}
        assert extract_person_ids(prop) == ["user-1"]

    def test_wrong_type_is_empty(self) -> None:
        assert extract_person_ids({"type": "relation", "relation": [{"id": "a"}]}) == []
        assert extract_relation_ids(None) == []
