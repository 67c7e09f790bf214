"""Tests for kanban_mcp.assets module."""

from kanban_mcp.assets import build_component_html, read_text_asset


class TestReadTextAsset:
    """Tests for tolerant asset loading."""

    def test_reads_utf8_asset(self, tmp_path) -> None:
        (tmp_path / "kanban.css").write_text("body{}", encoding="utf-8")

        assert read_text_asset("kanban.css", tmp_path) == "body{}"

    def test_missing_asset_is_empty(self, tmp_path) -> None:
        """A missing file should degrade to an empty string."""
        assert read_text_asset("kanban.js", tmp_path) == ""

    def test_non_utf8_asset_is_empty(self, tmp_path) -> None:
        """Undecodable bytes should degrade like a missing file."""
        (tmp_path / "kanban.css").write_bytes(b"body{}\xff\xfe")

        assert read_text_asset("kanban.css", tmp_path) == ""


class TestBuildComponentHtml:
    """Tests for the widget fragment."""

    def test_omits_empty_blocks(self) -> None:
        html = build_component_html("", "")

        assert '<div id="kanban-root"></div>' in html
        assert "<style>" not in html
        assert "<script>" not in html

    def test_inlines_assets(self) -> None:
        html = build_component_html("body{}", "init()", "<p>board</p>")

        assert '<div id="kanban-root"><p>board</p></div>' in html
        assert "<style>body{}</style>" in html
        assert "<script>init()</script>" in html
