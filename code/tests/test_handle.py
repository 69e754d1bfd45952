"""
Tests for search-param handles, the handle cache and the setter registry.

Run with:
    pytest code/tests/test_handle.py -v
"""

import sys
from pathlib import Path

# Add code directory to path for imports
code_dir = Path(__file__).parent.parent
sys.path.insert(0, str(code_dir))


def make_context(url="/", minimum_delay=-1, keep=None, **params):
    """Context on an in-memory history driven by a manual clock."""
    from core import ManualTimers, MemoryHistory, ParamContext

    history = MemoryHistory(url)
    context = ParamContext(
        history=history,
        timers=ManualTimers(),
        keep=keep or [],
        minimum_delay=minimum_delay,
        **params,
    )
    return context, history


class TestHandleCache:
    """Test the per-location handle cache."""

    def test_same_location_same_handle(self):
        """Test that consumers of one location share a handle."""
        context, _ = make_context("/")

        assert context.search_params() is context.search_params()

    def test_navigation_creates_new_handle(self):
        """Test that a new location object gets a new handle."""
        context, history = make_context("/?a=1")
        first = context.search_params()

        history.push("/?a=1")
        second = context.search_params()

        assert first is not second
        assert context.search_params(first.location) is first

    def test_cache_is_bounded(self):
        """Test that only the most recent handles are kept."""
        context, history = make_context("/", max_cached_handles=2)
        first = context.search_params()
        for index in range(3):
            history.push(f"/?page={index}")
            context.search_params()

        assert context.cached_handles == 2
        assert context.search_params(first.location) is not first


class TestParamAccess:
    """Test reads and typed params on a handle."""

    def test_defaults(self):
        """Test that absent params fall back to their defaults."""
        context, _ = make_context("/")
        search_params = context.search_params()

        assert search_params.param("key1", "value")[0] == "value"
        assert search_params.param("key2", 42)[0] == 42
        assert search_params.param("key3", ["a"])[0] == ["a"]
        assert search_params.param("key4", {"a": 1})[0] == {"a": 1}
        assert search_params.param("key5", True)[0] is True

    def test_same_param_same_tuple(self):
        """Test that param() returns the identical pair for the same name."""
        context, _ = make_context("/")
        search_params = context.search_params()

        first = search_params.param("key")
        second = search_params.param("key")

        assert len(first) == 2
        assert first is second

    def test_get_and_entries(self):
        """Test raw accessors."""
        context, _ = make_context("/?a=1&b=x")
        search_params = context.search_params()

        assert search_params.get("a") == "1"
        assert search_params.get("c") is None
        assert search_params.entries() == [("a", "1"), ("b", "x")]

    def test_reads_reflect_pending_mutations(self):
        """Test that reads see pushed values before they are committed."""
        context, history = make_context("/", minimum_delay=200)
        search_params = context.search_params()

        search_params.push({"a": "1"})

        assert search_params.get("a") == "1"
        assert history.location.search == ""


class TestSetters:
    """Test setters writing back to the URL."""

    def test_string_value(self):
        """Test reading and writing a string param."""
        context, history = make_context("/?a=value")

        a, set_a = context.search_params().param("a")
        assert a == "value"
        set_a("value2")

        assert history.location.search == "?a=value2"

    def test_boolean_values(self):
        """Test that changed booleans move to the end and defaults are removed."""
        context, history = make_context("/?off=off&on=on&zero=0&one=1&false=false&true=true")
        search_params = context.search_params()

        off, set_off = search_params.param("off", False)
        on, set_on = search_params.param("on", False)
        zero, set_zero = search_params.param("zero", False)
        one, set_one = search_params.param("one", False)
        f, set_f = search_params.param("false", False)
        t, set_t = search_params.param("true", False)
        assert (off, on, zero, one, f, t) == (False, True, False, True, False, True)

        set_off(True)
        assert history.location.search == "?on=on&zero=0&one=1&false=false&true=true&off=true"
        set_on(False)
        assert history.location.search == "?zero=0&one=1&false=false&true=true&off=true"
        set_zero(True)
        assert history.location.search == "?one=1&false=false&true=true&off=true&zero=true"
        set_one(False)
        assert history.location.search == "?false=false&true=true&off=true&zero=true"
        set_f(True)
        assert history.location.search == "?true=true&off=true&zero=true&false=true"
        set_t(False)
        assert history.location.search == "?off=true&zero=true&false=true"

    def test_number_value(self):
        """Test reading and writing a number param."""
        context, history = make_context("/?a=2")

        a, set_a = context.search_params().param("a", 1)
        assert a == 2
        set_a(3)

        assert history.location.search == "?a=3"

    def test_array_value(self):
        """Test reading and writing an array param."""
        context, history = make_context("/?a=x,y&b=")
        search_params = context.search_params()

        a, set_a = search_params.param("a", [])
        assert a == ["x", "y"]
        set_a(["y", "z"])
        assert history.location.search == "?b=&a=y%2Cz"

        assert search_params.param("b", [1, 2, 3])[0] == []
        assert search_params.param("c", [1, 2, 3])[0] == [1, 2, 3]

    def test_object_value(self):
        """Test reading and writing an object param."""
        context, history = make_context("/?ab=B&ac=42&d=d")

        a, set_a = context.search_params().param("a", {})
        assert a == {"b": "B", "c": 42}
        set_a({"y": "Y", "z": 43})

        assert history.location.search == "?d=d&ay=Y&az=43"

    def test_setting_default_removes_param(self):
        """Test that the default value never shows up in the URL."""
        context, history = make_context("/?page=3&q=x")

        _, set_page = context.search_params().param("page", 1)
        set_page(1)

        assert history.location.search == "?q=x"

    def test_setting_current_value_is_noop(self):
        """Test that re-setting the current value does not push history."""
        context, history = make_context("/?a=1&b=2")

        _, set_a = context.search_params().param("a", 0)
        set_a(1)

        assert len(history.entries) == 1
        assert history.location.search == "?a=1&b=2"

    def test_explicit_kind(self):
        """Test that a declared kind decodes independently of the default."""
        context, _ = make_context("/?n=5&flags=a,b")
        search_params = context.search_params()

        assert search_params.param("n", None, kind="number")[0] == 5
        assert search_params.param("flags", None, kind="array")[0] == ["a", "b"]

    def test_explicit_array_kind_without_default(self):
        """Test writing an array param declared by kind alone."""
        context, history = make_context("/?a=1")

        tags, set_tags = context.search_params().param("tags", kind="array")
        assert tags is None
        set_tags(["x", "y"])

        assert history.location.search == "?a=1&tags=x%2Cy"


class TestSetterRegistry:
    """Test setter identity across handles."""

    def test_setter_stable_across_navigation(self):
        """Test that the same (name, default) keeps its setter on a new handle."""
        context, history = make_context("/")
        _, first = context.search_params().param("a", 1)

        history.push("/?b=1")
        _, second = context.search_params().param("a", 1)

        assert first is second

    def test_setter_repointed_to_current_handle(self):
        """Test that an old setter commits through the newest handle."""
        context, history = make_context("/")
        _, set_a = context.search_params().param("a", "")

        history.push("/?b=1")
        context.search_params().param("a", "")
        set_a("x")

        assert history.location.search == "?b=1&a=x"

    def test_primitive_defaults_match_by_value_and_type(self):
        """Test primitive default matching."""
        context, history = make_context("/")
        _, by_int = context.search_params().param("a", 1)

        history.push("/")
        _, same_int = context.search_params().param("a", 1)
        history.push("/")
        _, by_bool = context.search_params().param("a", True)

        assert by_int is same_int
        assert by_int is not by_bool

    def test_composite_defaults_match_by_identity(self):
        """Test that fresh composite defaults create fresh setters."""
        context, history = make_context("/")
        default = []
        _, first = context.search_params().param("tags", default)

        history.push("/")
        _, same = context.search_params().param("tags", default)
        history.push("/")
        _, other = context.search_params().param("tags", [])

        assert first is same
        assert first is not other

    def test_explicit_key_keeps_setter_stable(self):
        """Test that an explicit key replaces default identity."""
        context, history = make_context("/")
        _, first = context.search_params().param("tags", [], key="tags")

        history.push("/")
        _, second = context.search_params().param("tags", [], key="tags")

        assert first is second
        assert len(context.setters) == 1

    def test_close_discards_setters(self):
        """Test that teardown empties the registry."""
        context, _ = make_context("/")
        context.search_params().param("a", 1)

        context.close()

        assert len(context.setters) == 0


class TestURLFor:
    """Test keep-aware URL building on the context."""

    def test_url_for_uses_keep(self):
        """Test that the context's keep list applies to other pages."""
        context, _ = make_context("/?a=1&b=2", keep=["a"])

        assert context.url_for("/different") == "/different?a=1"
        assert context.url_for() == "/?a=1&b=2"
        assert context.url_for(params={"b": None}) == "/?a=1"

    def test_navigate_pushes_url(self):
        """Test that navigate() pushes the merged URL and updates the location."""
        context, history = make_context("/?a=1&b=2", keep=["a"])

        context.navigate("/other", {"c": 3})

        assert history.location.path == "/other?a=1&c=3"
        assert context.location is history.location
