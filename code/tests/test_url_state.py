"""
Tests for query-string parameters and URL merging.

Run with:
    pytest code/tests/test_url_state.py -v
"""

import sys
from pathlib import Path

# Add code directory to path for imports
code_dir = Path(__file__).parent.parent
sys.path.insert(0, str(code_dir))

import pytest


class TestQueryParams:
    """Test the ordered query parameter container."""

    def test_parse_keeps_order_and_blank_values(self):
        """Test that parsing keeps order, blank values and bare keys."""
        from utils import QueryParams

        params = QueryParams("?a=x,y&b=&c")

        assert params.entries() == [("a", "x,y"), ("b", ""), ("c", "")]
        assert params.get("b") == ""
        assert params.get("missing") is None

    def test_set_replaces_first_occurrence_in_place(self):
        """Test that set() keeps the position and drops duplicates."""
        from utils import QueryParams

        params = QueryParams("a=1&b=2&a=3")
        params.set("a", "x")

        assert params.to_string() == "a=x&b=2"

    def test_delete_then_set_moves_to_end(self):
        """Test that a deleted and re-set parameter is appended."""
        from utils import QueryParams

        params = QueryParams("a=1&b=2")
        params.delete("a")
        params.set("a", 3)

        assert params.to_string() == "b=2&a=3"

    def test_percent_encoding(self):
        """Test standard form encoding on serialization."""
        from utils import QueryParams

        params = QueryParams("q=hello+world")
        assert params.get("q") == "hello world"

        params.set("tags", "y,z")
        assert params.to_string() == "q=hello+world&tags=y%2Cz"

    def test_values_are_stringified(self):
        """Test that booleans and numbers are written like in a browser."""
        from utils import QueryParams

        params = QueryParams()
        params.set("flag", True)
        params.set("count", 43.0)
        params.set("ratio", 0.5)

        assert params.to_string() == "flag=true&count=43&ratio=0.5"


class TestResolveURL:
    """Test URL merging across navigation."""

    def test_same_page_keeps_all_params(self):
        """Test that every current param is kept on the same page."""
        from core import Location
        from utils import resolve_url

        location = Location.from_path("/path?a=1&b=2")

        assert resolve_url(location, [], params={"c": 1}) == "/path?a=1&b=2&c=1"

    def test_none_override_deletes(self):
        """Test that a None override removes the parameter."""
        from core import Location
        from utils import resolve_url

        location = Location.from_path("/path?a=1&b=2")

        assert resolve_url(location, [], params={"a": None}) == "/path?b=2"

    def test_different_page_keeps_only_keep_list(self):
        """Test that only kept params survive a page change."""
        from core import Location
        from utils import resolve_url

        location = Location.from_path("/?a=1&b=2")

        assert resolve_url(location, ["a"], "/different") == "/different?a=1"
        assert resolve_url(location, ["a"], "/different?a=2") == "/different?a=2"
        assert resolve_url(location, ["a"], "/different?b=2", {"b": 3}) == "/different?a=1&b=3"

    def test_same_page_with_explicit_query(self):
        """Test that the target query wins over current params on the same page."""
        from core import Location
        from utils import resolve_url

        location = Location.from_path("/?a=1&b=2")

        assert resolve_url(location, ["a"], "/") == "/?a=1&b=2"
        assert resolve_url(location, ["a"], "/?a=2") == "/?a=2&b=2"
        assert resolve_url(location, ["a"], "/?b=0", {"b": 3}) == "/?a=1&b=3"

    def test_empty_query_returns_bare_path(self):
        """Test that no '?' is added without parameters."""
        from core import Location
        from utils import resolve_url

        location = Location.from_path("/?a=1")

        assert resolve_url(location, [], "/other") == "/other"
        assert resolve_url(location, [], params={"a": None}) == "/"

    def test_keep_ignores_missing_params(self):
        """Test that kept params absent from the current URL are not added."""
        from core import Location
        from utils import resolve_url

        location = Location.from_path("/?a=1")

        assert resolve_url(location, ["a", "b"], "/other") == "/other?a=1"

    def test_query_only_target_resolves_to_root(self):
        """Test that a bare query string targets the root path."""
        from core import Location
        from utils import resolve_url

        on_root = Location.from_path("/?a=1&b=2")
        elsewhere = Location.from_path("/other?a=1&b=2")

        assert resolve_url(on_root, ["a"], "?page=2") == "/?a=1&b=2&page=2"
        assert resolve_url(elsewhere, ["a"], "?page=2") == "/?a=1&page=2"

    @pytest.mark.parametrize("target", ["no-slash", "//evil.example/path", "http://host/x", 42])
    def test_invalid_target_raises(self, target):
        """Test that an unparsable target fails fast."""
        from core import Location
        from utils import URLSyntaxError, resolve_url

        with pytest.raises(URLSyntaxError):
            resolve_url(Location.from_path("/"), [], target)

    def test_url_syntax_error_is_value_error(self):
        """Test that URLSyntaxError can be caught as ValueError."""
        from utils import URLSyntaxError

        assert issubclass(URLSyntaxError, ValueError)
