"""
Transform registry tests

Tests built-in transforms, wildcard lookup, caller-supplied transforms and
error wrapping.
"""

import pytest

from fileinjector.lib.errors import TransformError
from fileinjector.lib.transforms import TransformRegistry
from fileinjector.models.transforms import TransformCategory


@pytest.fixture
def registry() -> TransformRegistry:
    return TransformRegistry()


class TestLookup:
    """Test name resolution"""

    def test_exact_name(self, registry):
        assert registry.spec_get("trim").name == "trim"

    def test_wildcard_name(self, registry):
        """figlet-<font> resolves to the figlet-* spec"""
        spec = registry.spec_get("figlet-doom")

        assert spec.name == "figlet-*"
        assert spec.variant_get("figlet-doom") == "doom"

    def test_wildcard_needs_suffix(self, registry):
        """A bare prefix is not a wildcard match"""
        assert registry.spec_get("figlet-") is None

    def test_unknown_name(self, registry):
        assert registry.spec_get("nope") is None

    def test_list_by_category(self, registry):
        names = {spec.name for spec in registry.transforms_listByCategory(TransformCategory.ASCII_ART)}
        assert names == {"figlet-*", "cowsay-*"}

    def test_without_builtins(self):
        """builtins=False gives an empty registry"""
        assert TransformRegistry(builtins=False).specs == {}


class TestBuiltins:
    """Test built-in transforms"""

    def test_trim(self, registry):
        assert registry.apply("trim", "  text \n") == "text"

    def test_html_escape(self, registry):
        assert registry.apply("html-escape", '<a href="x">&</a>') == (
            "&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;"
        )

    def test_json_string(self, registry):
        assert registry.apply("json-string", 'say "hi"\n') == '"say \\"hi\\"\\n"'

    def test_figlet(self, registry):
        """Figlet output is multi-line ASCII art"""
        result = registry.apply("figlet-standard", "Hi")
        assert "\n" in result
        assert result.strip()

    def test_figlet_unknown_font(self, registry):
        """A missing font is a transform error"""
        with pytest.raises(TransformError):
            registry.apply("figlet-no-such-font-xyz", "Hi", "banner.txt")

    def test_cowsay(self, registry):
        assert "moo" in registry.apply("cowsay-cow", "moo")

    def test_highlight(self, registry):
        """Highlighting produces HTML with inline styles"""
        result = registry.apply("highlight-python", "print('hi')\n")

        assert 'class="highlight"' in result
        assert "style=" in result
        assert "print" in result

    def test_highlight_unknown_language(self, registry):
        """Unknown languages fall back to plain text"""
        result = registry.apply("highlight-nolang", "a < b\n")
        assert "a &lt; b" in result


class TestUserTransforms:
    """Test caller-supplied transforms"""

    def test_registered_function(self):
        registry = TransformRegistry({"upper": str.upper})
        assert registry.apply("upper", "abc") == "ABC"
        assert registry.spec_get("upper").category is TransformCategory.USER

    def test_overrides_builtin(self):
        """User transforms replace built-ins with the same name"""
        registry = TransformRegistry({"trim": lambda text: "X"})
        assert registry.apply("trim", "  a  ") == "X"

    def test_unknown_is_noop(self, registry):
        assert registry.apply("nope", "text") == "text"

    def test_error_wrapped(self):
        """Exceptions are wrapped with the transform name and path"""
        def broken(text):
            raise RuntimeError("boom")

        registry = TransformRegistry({"broken": broken})

        with pytest.raises(TransformError) as excinfo:
            registry.apply("broken", "text", "parts/a.txt")

        assert excinfo.value.name == "broken"
        assert excinfo.value.path == "parts/a.txt"
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert "boom" in str(excinfo.value)
