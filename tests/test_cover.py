# Path: tests/test_cover.py
# Purpose: Tests for cover precedence, override parsing, case correction, and subtree search.
# Layer: tests.
# Details: Trees are written with the conftest layout helpers and built end to end.

from __future__ import annotations

from conftest import child

from core.gallery.addresses import AddressGrammar
from core.gallery.cover import CoverResolver
from core.gallery.storage import LocalStorage


def _resolver(root) -> CoverResolver:
    return CoverResolver(root, LocalStorage(), AddressGrammar("Portfolio"))


class TestFallbackChain:
    def test_first_child_with_something_to_show_wins(self, build):
        root = build({"D": {"C1": {}, "C2": {"x.jpg": ""}}})
        assert child(root, "D").cover == "/Portfolio/D/C2/x.jpg"

    def test_single_direct_media_beats_children(self, build):
        root = build({"D": {"one.jpg": "", "sub": {"z.jpg": ""}}})
        assert child(root, "D").cover == "/Portfolio/D/one.jpg"

    def test_several_direct_media_defer_to_children(self, build):
        root = build({"D": {"a.jpg": "", "b.jpg": "", "sub": {"z.jpg": ""}}})
        assert child(root, "D").cover == "/Portfolio/D/sub/z.jpg"

    def test_leaf_falls_back_to_first_media_in_display_order(self, build):
        root = build({"D": {"b.jpg": "", "a.jpg": "", ".order": "b.jpg\n"}})
        assert child(root, "D").cover == "/Portfolio/D/b.jpg"

    def test_child_override_cover_propagates_upwards(self, build):
        root = build({"D": {"A": {".cover": "y.jpg\n", "x.jpg": "", "y.jpg": ""}}})
        assert child(root, "D").cover == "/Portfolio/D/A/y.jpg"

    def test_nothing_to_show_means_no_cover(self, build):
        root = build({"D": {"E": {}}})
        assert child(root, "D").cover is None


class TestOverride:
    def test_leaf_override_picks_a_later_image(self, build):
        root = build({"D": {".cover": "b.jpg\n", "a.jpg": "", "b.jpg": ""}})
        node = child(root, "D")
        assert node.cover == "/Portfolio/D/b.jpg"
        assert node.media == ("a.jpg", "b.jpg")

    def test_bare_filename_found_three_levels_down(self, build):
        root = build(
            {
                "D": {
                    ".cover": "sibling.jpg\n",
                    "a": {"first.jpg": "", "b": {"c": {"Sibling.jpg": "", "other.jpg": ""}}},
                }
            }
        )
        assert child(root, "D").cover == "/Portfolio/D/a/b/c/Sibling.jpg"

    def test_direct_file_beats_subtree_match(self, build):
        root = build({"D": {".cover": "x.jpg", "a.jpg": "", "x.jpg": "", "sub": {"x.jpg": ""}}})
        assert child(root, "D").cover == "/Portfolio/D/x.jpg"

    def test_rooted_address_is_case_corrected(self, build):
        root = build({"D": {".cover": "portfolio/other/PIC.JPG", "a.jpg": "", "b.jpg": ""}, "other": {"pic.jpg": ""}})
        assert child(root, "D").cover == "/Portfolio/other/pic.jpg"

    def test_rooted_miss_does_not_search_the_subtree(self, build):
        root = build(
            {
                "D": {
                    ".cover": "Portfolio/D/nested.jpg",
                    "a.jpg": "",
                    "b.jpg": "",
                    "sub": {"nested.jpg": "", "alpha.jpg": ""},
                }
            }
        )
        assert child(root, "D").cover == "/Portfolio/D/sub/alpha.jpg"

    def test_relative_address_into_a_sibling(self, build):
        root = build({"D": {".cover": "../E/e2.jpg", "a.jpg": ""}, "E": {"e1.jpg": "", "e2.jpg": ""}})
        assert child(root, "D").cover == "/Portfolio/E/e2.jpg"

    def test_directory_override_uses_its_first_media(self, build):
        root = build({"D": {".cover": "Portfolio/Other", "a.jpg": "", "c.jpg": ""}, "Other": {"b10.jpg": "", "b2.jpg": ""}})
        assert child(root, "D").cover == "/Portfolio/Other/b2.jpg"

    def test_directory_override_skips_hidden_media(self, build):
        root = build(
            {
                ".ignore": "a0.jpg\n",
                "D": {".cover": "Portfolio/Other", "a.jpg": "", "c.jpg": ""},
                "Other": {".thumb.jpg": "", "@x.jpg": "", "a0.jpg": "", "b.jpg": ""},
            }
        )
        assert child(root, "D").cover == "/Portfolio/Other/b.jpg"

    def test_directory_override_honours_the_target_ignore_file(self, build):
        root = build(
            {
                "D": {".cover": "../Other", "a.jpg": "", "c.jpg": ""},
                "Other": {".ignore": "B1.jpg\n", "b1.jpg": "", "b2.jpg": ""},
            }
        )
        assert child(root, "D").cover == "/Portfolio/Other/b2.jpg"

    def test_broken_reference_falls_through(self, build):
        root = build({"D": {".cover": "missing.jpg", "only.jpg": ""}})
        assert child(root, "D").cover == "/Portfolio/D/only.jpg"

    def test_escaping_override_is_no_cover(self, collection, make_tree):
        make_tree({"D": {".cover": "../../x.jpg", "a.jpg": "", "b.jpg": ""}})
        assert _resolver(collection).resolve_override(collection / "D", ["D"]) is None

    def test_escaping_override_still_builds(self, build):
        root = build({"D": {".cover": "../../x.jpg", "a.jpg": "", "b.jpg": ""}})
        assert child(root, "D").cover == "/Portfolio/D/a.jpg"

    def test_comment_only_file_behaves_like_no_file(self, build):
        root = build(
            {
                "D": {".cover": "# nothing\n\n// here\n", "a.jpg": "", "b.jpg": ""},
                "E": {"a.jpg": "", "b.jpg": ""},
            }
        )
        assert child(root, "D").cover == "/Portfolio/D/a.jpg"
        assert child(root, "E").cover == "/Portfolio/E/a.jpg"

    def test_absolute_path_outside_collection_is_ignored(self, build):
        root = build({"D": {".cover": "/etc/x.jpg", "a.jpg": "", "b.jpg": ""}})
        assert child(root, "D").cover == "/Portfolio/D/a.jpg"

    def test_only_first_meaningful_line_counts(self, build):
        root = build({"D": {".cover": "# pick\nmissing.jpg\nb.jpg\n", "a.jpg": "", "b.jpg": ""}})
        assert child(root, "D").cover == "/Portfolio/D/a.jpg"


class TestSubtreeSearch:
    def test_shallower_match_wins(self, collection, make_tree):
        make_tree({"D": {"a": {"deep": {"t.jpg": ""}}, "b": {"t.jpg": ""}}})
        assert _resolver(collection).find_in_subtree(["D"], "t.jpg") == ["D", "b", "t.jpg"]

    def test_siblings_visited_case_insensitively(self, collection, make_tree):
        make_tree({"D": {"B": {"t.jpg": ""}, "a": {"t.jpg": ""}}})
        assert _resolver(collection).find_in_subtree(["D"], "t.jpg") == ["D", "a", "t.jpg"]

    def test_exact_name_preferred_within_a_directory(self, collection, make_tree):
        make_tree({"D": {"sub": {"T.JPG": "", "t.jpg": ""}}})
        assert _resolver(collection).find_in_subtree(["D"], "t.jpg") == ["D", "sub", "t.jpg"]

    def test_dot_directories_are_not_searched(self, collection, make_tree):
        make_tree({"D": {".hidden": {"t.jpg": ""}}})
        assert _resolver(collection).find_in_subtree(["D"], "t.jpg") is None

    def test_missing_start_directory(self, collection):
        assert _resolver(collection).find_in_subtree(["nope"], "t.jpg") is None

    def test_symlink_cycle_terminates(self, collection, make_tree):
        make_tree({"D": {"sub": {}}})
        (collection / "D" / "sub" / "loop").symlink_to(collection / "D", target_is_directory=True)
        assert _resolver(collection).find_in_subtree(["D"], "t.jpg") is None


class TestCorrectCase:
    def test_restores_on_disk_casing(self, collection, make_tree):
        make_tree({"Watches": {"Blue.JPG": ""}})
        assert _resolver(collection).correct_case(["watches", "blue.jpg"]) == ["Watches", "Blue.JPG"]

    def test_intermediate_segment_must_be_a_directory(self, collection, make_tree):
        make_tree({"a.jpg": ""})
        assert _resolver(collection).correct_case(["a.jpg", "x.jpg"]) is None

    def test_want_file_rejects_directories(self, collection, make_tree):
        make_tree({"pic.jpg": {}})
        assert _resolver(collection).correct_case(["pic.jpg"], want_file=True) is None
        assert _resolver(collection).correct_case(["pic.jpg"], want_file=False) == ["pic.jpg"]
