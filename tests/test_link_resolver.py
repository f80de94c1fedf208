"""Tests for wikilink resolution, link extraction and rendering."""
from brain_graph.models.schema import NoteLink
from brain_graph.services.link_resolver import (
    extract_links,
    render_readable,
    resolve_links,
    target_candidates,
)

FOO = "20240101100000"
DEVOPS = "20240101100001"
EXCLUDED = "20240101100003"


class TestResolveLinks:
    """Tests for title -> id rewriting."""

    def test_plain_link_uses_written_title(self, title_index):
        assert resolve_links("See [[Foo]].", title_index) == f"See [[{FOO}|Foo]]."

    def test_display_text_is_preserved(self, title_index):
        assert resolve_links("[[Foo|Custom]]", title_index) == f"[[{FOO}|Custom]]"

    def test_case_insensitive_fallback(self, title_index):
        assert resolve_links("[[foo]]", title_index) == f"[[{FOO}|foo]]"
        assert resolve_links("[[devops|Ops]]", title_index) == f"[[{DEVOPS}|Ops]]"

    def test_extension_and_path_are_ignored(self, title_index):
        assert resolve_links("[[tech/DevOps.md]]", title_index) == f"[[{DEVOPS}|DevOps]]"
        assert resolve_links("[[a\\b\\Foo]]", title_index) == f"[[{FOO}|Foo]]"

    def test_heading_anchor_is_ignored(self, title_index):
        assert resolve_links("[[Foo#Setup]]", title_index) == f"[[{FOO}|Foo]]"
        assert resolve_links("[[Foo^abc123|see]]", title_index) == f"[[{FOO}|see]]"

    def test_link_into_excluded_folder_still_resolves(self, title_index):
        out = resolve_links("[[Excluded Note]]", title_index)
        assert out == f"[[{EXCLUDED}|Excluded Note]]"

    def test_unresolved_link_is_left_unchanged(self, title_index):
        text = "[[Nowhere]] and [[Nowhere|alias]]"
        assert resolve_links(text, title_index) == text

    def test_image_embeds_are_untouched(self, title_index):
        text = "![[Foo]] ![[diagram.png|400x200]]"
        assert resolve_links(text, title_index) == text

    def test_all_matches_rewritten_in_one_pass(self, title_index):
        out = resolve_links("[[Foo]] [[DevOps]] [[Foo|again]]", title_index)
        assert out == f"[[{FOO}|Foo]] [[{DEVOPS}|DevOps]] [[{FOO}|again]]"

    def test_extra_pipe_sections_are_ignored(self, title_index):
        assert resolve_links("[[Foo|Shown|ignored]]", title_index) == f"[[{FOO}|Shown]]"

    def test_empty_display_falls_back_to_title(self, title_index):
        assert resolve_links("[[Foo| ]]", title_index) == f"[[{FOO}|Foo]]"

    def test_dotted_title_matches_as_written_first(self):
        from pathlib import Path

        from brain_graph.models.title_index import TitleIndex

        index = TitleIndex.build([
            (Path("/v/v1.md"), "20240101100000"),
            (Path("/v/v1.2 notes.md"), "20240101100001"),
        ])
        assert resolve_links("[[v1.2 notes]]", index) == "[[20240101100001|v1.2 notes]]"

    def test_target_candidates(self):
        assert target_candidates("projects/Foo.md#Intro") == ["Foo.md", "Foo"]
        assert target_candidates("Foo") == ["Foo"]
        assert target_candidates("#Heading") == []


class TestExtractLinks:
    """Tests for collecting id-form links."""

    def test_extracts_in_order_with_duplicates(self):
        content = f"[[{FOO}|Foo]] text [[{DEVOPS}|Ops]] [[{FOO}|again]]"
        assert extract_links(content) == [
            NoteLink(target_id=FOO, display_text="Foo"),
            NoteLink(target_id=DEVOPS, display_text="Ops"),
            NoteLink(target_id=FOO, display_text="again"),
        ]

    def test_suffixed_ids_are_links(self):
        links = extract_links(f"[[{FOO}-ab12|Twin]]")
        assert links == [NoteLink(target_id=f"{FOO}-ab12", display_text="Twin")]

    def test_missing_display_defaults_to_id(self):
        assert extract_links(f"[[{FOO}]]") == [NoteLink(target_id=FOO, display_text=FOO)]

    def test_unresolved_and_image_links_are_skipped(self):
        assert extract_links(f"[[Nowhere]] ![[{FOO}]]") == []


class TestRenderReadable:
    """Tests for display rendering of resolved links."""

    def test_links_become_anchors(self, title_index):
        out = render_readable(f"See [[{FOO}|Custom]] and [[{DEVOPS}]]", title_index)
        assert out == f"See [Custom](#n-{FOO}) and [DevOps](#n-{DEVOPS})"

    def test_unknown_id_without_display_uses_id(self, title_index):
        assert render_readable("[[20991231235959]]", title_index) == (
            "[20991231235959](#n-20991231235959)"
        )

    def test_unresolved_title_links_stay_raw(self, title_index):
        assert render_readable("[[Nowhere]]", title_index) == "[[Nowhere]]"

    def test_image_id_embeds_are_dropped(self, title_index):
        assert render_readable(f"a ![[{FOO}]] b", title_index) == "a  b"

    def test_blank_lines_collapsed_and_trimmed(self, title_index):
        assert render_readable("\n\na\n\n\n\nb\n\n", title_index) == "a\n\nb"
