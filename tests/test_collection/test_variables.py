"""Tests for pcli.collection.variables."""

from __future__ import annotations

import pytest

from pcli.collection.models import Collection, ResourceDetails
from pcli.collection.variables import apply_variables, merge_variables, parse_variables
from pcli.exceptions import InvalidUsageError


class TestParseVariables:
    @pytest.mark.parametrize("text", [None, "", "  "])
    def test_blank(self, text) -> None:
        assert parse_variables(text) == {}

    def test_object(self) -> None:
        assert parse_variables('{"id": 7, "name": "x"}') == {"id": 7, "name": "x"}

    def test_invalid_json(self) -> None:
        with pytest.raises(InvalidUsageError, match="valid JSON"):
            parse_variables("{id: 7}")

    def test_not_an_object(self) -> None:
        with pytest.raises(InvalidUsageError, match="JSON object"):
            parse_variables("[1, 2]")


class TestMergeVariables:
    def test_overrides_win(self) -> None:
        root = Collection(name="c", variables={"a": "1", "b": "2"})
        assert merge_variables(root, {"b": "override", "c": "3"}) == {
            "a": "1",
            "b": "override",
            "c": "3",
        }

    def test_collection_untouched(self) -> None:
        root = Collection(name="c", variables={"a": "1"})
        merge_variables(root, {"a": "2"})
        assert root.variables == {"a": "1"}


class TestApplyVariables:
    """Test ``{{name}}`` substitution in extracted details."""

    def _details(self) -> ResourceDetails:
        return ResourceDetails(
            method="post",
            path="/{{version}}/users/:id",
            params={"id": "{{userId}}"},
            query={"q": "{{ term }}"},
            headers={"Authorization": "Bearer {{token}}"},
            body={"{{field}}": ["{{userId}}", 3, None]},
        )

    def test_substitutes_everywhere(self) -> None:
        result = apply_variables(
            self._details(),
            {
                "version": "v1",
                "userId": 42,
                "term": "cats",
                "token": "t0k",
                "field": "name",
            },
        )
        assert result.path == "/v1/users/:id"
        assert result.params == {"id": "42"}
        assert result.query == {"q": "cats"}
        assert result.headers == {"Authorization": "Bearer t0k"}
        assert result.body == {"name": ["42", 3, None]}

    def test_unknown_names_kept(self) -> None:
        result = apply_variables(self._details(), {"version": "v2"})
        assert result.path == "/v2/users/:id"
        assert result.headers == {"Authorization": "Bearer {{token}}"}

    def test_method_untouched(self) -> None:
        details = ResourceDetails(method="{{m}}", path="/")
        assert apply_variables(details, {"m": "get"}).method == "{{m}}"

    def test_no_variables_returns_same(self) -> None:
        details = self._details()
        assert apply_variables(details, {}) is details

    def test_original_not_modified(self) -> None:
        details = self._details()
        apply_variables(details, {"version": "v9"})
        assert details.path == "/{{version}}/users/:id"
