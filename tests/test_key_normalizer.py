import tempfile
import unittest
from pathlib import Path

from pipeline.aliases import FAMILY_ALIASES
from pipeline.normalize import DEFAULT_NORMALIZER, KeyNormalizer, join_key, load_normalizer, profile_key
from tls_stats.domain import CapabilityProfile


class TestKeyNormalizer(unittest.TestCase):
    def test_family_aliases_collapse_to_catalog_family(self) -> None:
        self.assertEqual("Chrome:70", join_key("Chrome Mobile", "75"))
        self.assertEqual("Chrome:70", join_key("Chromium", "72"))
        self.assertEqual("Safari:13", join_key("Mobile Safari UI/WKWebView", "17"))
        self.assertEqual("Android:9.0", join_key("Samsung Internet", "23"))
        self.assertEqual("Firefox:73", join_key("Thunderbird", "68"))
        self.assertEqual("IE:8-10", join_key("IE Mobile", "9"))

    def test_chromium_edge_joins_chrome_profiles(self) -> None:
        self.assertEqual("Edge:18", join_key("Edge", "18"))
        self.assertEqual("Edge:16", join_key("Edge", "17"))
        self.assertEqual("Chrome:70", join_key("Edge", "79"))
        self.assertEqual("Chrome:80", join_key("Edge Mobile", "85"))
        self.assertEqual("Chrome:120", join_key("Edge", "120"))

    def test_version_table_can_move_to_another_family(self) -> None:
        n = DEFAULT_NORMALIZER.extended(version_tables={"Opera": {"100": "Chrome:100"}})
        self.assertEqual("Chrome:100", n.join_key("Opera Mobile", "100"))

    def test_unknown_family_and_version_pass_through(self) -> None:
        self.assertEqual("Yandex Browser:23", join_key("Yandex Browser", "23"))
        self.assertEqual("Chrome:90", join_key("Chrome", "90"))
        self.assertEqual("Safari:9", join_key("Safari", "9"))

    def test_join_key_is_pure(self) -> None:
        first = [join_key(f, "80") for f in sorted(FAMILY_ALIASES)]
        second = [join_key(f, "80") for f in sorted(FAMILY_ALIASES)]
        self.assertEqual(first, second)
        self.assertEqual(join_key("Chrome Mobile iOS", "85"), join_key("Chrome Mobile iOS", "85"))

    def test_tables_are_copied_at_construction(self) -> None:
        aliases = {"Foo": "Bar"}
        n = KeyNormalizer(family_aliases=aliases, version_tables={})
        aliases["Foo"] = "Baz"
        self.assertEqual("Bar:1", n.join_key("Foo", "1"))
        with self.assertRaises(TypeError):
            n.family_aliases["Foo"] = "Qux"  # type: ignore[index]

    def test_profile_key_uses_name_and_version_verbatim(self) -> None:
        p = CapabilityProfile(name="Chrome", platform="Win 10", version="80", lowest_protocol=769, highest_protocol=772)
        self.assertEqual("Chrome:80", profile_key(p))

    def test_extended_merges_version_tables_per_family(self) -> None:
        n = DEFAULT_NORMALIZER.extended(version_tables={"Chrome": {"120": "80"}})
        self.assertEqual("Chrome:80", n.join_key("Chrome", "120"))
        # existing entries survive the merge
        self.assertEqual("Chrome:70", n.join_key("Chrome", "75"))
        # the default normalizer itself is untouched
        self.assertEqual("Chrome:120", DEFAULT_NORMALIZER.join_key("Chrome", "120"))

    def test_load_normalizer_from_yaml(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "aliases.yaml"
            p.write_text(
                "family_aliases:\n"
                "  Yandex Browser: Chrome\n"
                "versions:\n"
                "  Chrome:\n"
                "    120: 80\n",
                encoding="utf-8",
            )
            n = load_normalizer(p)

        self.assertEqual("Chrome:80", n.join_key("Yandex Browser", "120"))
        self.assertEqual("Chrome:80", n.join_key("Chrome Mobile", "120"))
        self.assertEqual("Safari:13", n.join_key("Mobile Safari", "16"))

    def test_load_normalizer_rejects_non_mapping(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "aliases.yaml"
            p.write_text("- just\n- a list\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_normalizer(p)

            with self.assertRaises(FileNotFoundError):
                load_normalizer(Path(td) / "missing.yaml")


if __name__ == "__main__":
    unittest.main()
