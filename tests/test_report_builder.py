import math
import unittest
from datetime import date

from pipeline.aggregate import analyse
from pipeline.names import NONSTANDARD_CIPHER, NONSTANDARD_CURVE, UNKNOWN_PROTOCOL
from pipeline.report import build_report, build_report_from_tally, render_text, sorted_counts
from tls_stats.domain import AggregateTally, CapabilityProfile, UsageRecord

TODAY = date(2026, 10, 18)


def _usage(family: str, version: str, weight: int) -> UsageRecord:
    return UsageRecord(
        date=date(2026, 9, 1),
        browser_family=family,
        browser_major_version=version,
        os_family="Windows",
        os_major_version="10",
        weight=weight,
    )


def _profile(name, version, lowest, highest, suites=(), names=None, curves=()) -> CapabilityProfile:
    return CapabilityProfile(
        name=name,
        platform="",
        version=version,
        lowest_protocol=lowest,
        highest_protocol=highest,
        suite_ids=tuple(suites),
        suite_names=tuple(names if names is not None else [""] * len(suites)),
        curve_ids=tuple(curves),
    )


class TestReportBuilder(unittest.TestCase):
    def test_sort_is_by_count_then_ascending_id(self) -> None:
        a = {772: 5, 769: 10, 771: 5, 770: 1}
        b = {770: 1, 771: 5, 772: 5, 769: 10}
        self.assertEqual([(769, 10), (771, 5), (772, 5), (770, 1)], sorted_counts(a))
        self.assertEqual(sorted_counts(a), sorted_counts(b))

    def test_percent_is_share_of_matched_weight(self) -> None:
        tally = AggregateTally(
            protocols={771: 100, 772: 60},
            ciphers={4865: 60, 49195: 100},
            curves={29: 100},
            total=100,
        )
        report = build_report_from_tally(tally, start=None, end=None, generation_date=TODAY)

        self.assertEqual([(771, 1.0), (772, 0.6)], [(e.id, e.percent) for e in report.protocols])
        self.assertEqual([49195, 4865], [e.id for e in report.ciphers])
        self.assertEqual(TODAY, report.generation_date)

    def test_single_entry_profiles_sum_to_one(self) -> None:
        records = [_usage("A", "1", 13), _usage("B", "1", 29), _usage("C", "1", 58), _usage("Nope", "1", 1000)]
        profiles = [
            _profile("A", "1", 771, 771, suites=(1,), curves=(23,)),
            _profile("B", "1", 772, 772, suites=(2,), curves=(29,)),
            _profile("C", "1", 770, 770, suites=(3,), curves=(24,)),
        ]
        report = build_report(analyse(records, profiles), generation_date=TODAY)

        for section in (report.protocols, report.ciphers, report.curves):
            self.assertTrue(math.isclose(1.0, sum(e.percent for e in section), abs_tol=1e-9))

    def test_every_percent_is_bounded_by_one(self) -> None:
        records = [_usage("A", "1", 30), _usage("B", "1", 70)]
        profiles = [
            _profile("A", "1", 769, 772, suites=(1, 2), curves=(23, 29)),
            _profile("B", "1", 771, 772, suites=(2,), curves=(29,)),
        ]
        report = build_report(analyse(records, profiles), generation_date=TODAY)

        by_id = {e.id: e.percent for e in report.protocols}
        self.assertEqual({769: 0.3, 770: 0.3, 771: 1.0, 772: 1.0}, by_id)
        for section in (report.protocols, report.ciphers, report.curves):
            self.assertTrue(all(0.0 <= e.percent <= 1.0 for e in section))

    def test_zero_total_gives_zero_percentages(self) -> None:
        tally = AggregateTally(protocols={771: 0}, ciphers={1: 0}, curves={29: 0}, total=0)
        report = build_report_from_tally(tally, start=None, end=None, generation_date=TODAY)
        self.assertEqual([0.0], [e.percent for e in report.protocols])
        self.assertEqual([0.0], [e.percent for e in report.ciphers])
        self.assertEqual([0.0], [e.percent for e in report.curves])

    def test_name_resolution(self) -> None:
        records = [_usage("A", "1", 10), _usage("B", "1", 10)]
        profiles = [
            _profile(
                "A", "1", 2, 772,
                suites=(0x1301, 0xCC13, 0xFFF0),
                names=("CATALOG_NAME_FOR_AES128", "TLS_ECDHE_RSA_WITH_CHACHA20_POLY1305_OLD", ""),
                curves=(29, 9999),
            ),
            _profile("B", "1", 0x7F1C, 0x7F1C, suites=(0xCC13,), names=("SECOND_NAME",), curves=()),
        ]
        report = build_report(analyse(records, profiles), generation_date=TODAY)
        protocols = {e.id: e.name for e in report.protocols}
        ciphers = {e.id: e.name for e in report.ciphers}
        curves = {e.id: e.name for e in report.curves}

        self.assertEqual("SSL v3.0", protocols[768])
        self.assertEqual("TLS v1.3", protocols[772])
        self.assertEqual(UNKNOWN_PROTOCOL, protocols[0x7F1C])

        # standard table beats the catalog's spelling
        self.assertEqual("TLS_AES_128_GCM_SHA256", ciphers[0x1301])
        # first catalog name wins for non-standard ids
        self.assertEqual("TLS_ECDHE_RSA_WITH_CHACHA20_POLY1305_OLD", ciphers[0xCC13])
        # an empty catalog name is still "supplied"; only a missing one falls back
        self.assertEqual("", ciphers[0xFFF0])

        self.assertEqual("x25519", curves[29])
        self.assertEqual(NONSTANDARD_CURVE, curves[9999])

    def test_nonstandard_cipher_without_catalog_name(self) -> None:
        tally = AggregateTally(ciphers={0xFFF1: 1}, total=1)
        report = build_report_from_tally(tally, start=None, end=None, generation_date=TODAY)
        self.assertEqual(NONSTANDARD_CIPHER, report.ciphers[0].name)

    def test_generation_date_is_independent_of_usage_window(self) -> None:
        a = analyse([_usage("A", "1", 1)], [_profile("A", "1", 771, 771)])
        report = build_report(a, generation_date=TODAY)
        self.assertEqual(date(2026, 9, 1), report.start_date)
        self.assertEqual(date(2026, 9, 1), report.end_date)
        self.assertEqual(TODAY, report.generation_date)

    def test_render_text_sections(self) -> None:
        tally = AggregateTally(protocols={771: 4, 772: 1}, ciphers={0x1301: 2}, curves={29: 4}, total=4)
        text = render_text(build_report_from_tally(tally, start=None, end=None, generation_date=TODAY))
        lines = text.splitlines()

        self.assertEqual(["Protocols", "============="], lines[:2])
        self.assertEqual("\t771\t1.000000\tTLS v1.2", lines[2])
        self.assertEqual("\t772\t0.250000\tTLS v1.3", lines[3])
        self.assertEqual(["Ciphers", "============="], lines[4:6])
        self.assertEqual("\t4865\t0.500000\tTLS_AES_128_GCM_SHA256", lines[6])
        self.assertEqual(["Curves", "=============", "\t29\t1.000000\tx25519"], lines[7:])


if __name__ == "__main__":
    unittest.main()
