# Copyright 2024-2026 Aptselect Authors

import io
import os
import types
import unittest

from aptselect.mirrorparser import (
    FTP,
    HTTP,
    MAIN,
    NONUS,
    MirrorListParser,
)
from aptselect.output import Output


MIRRORS_FULL = os.path.join(os.path.dirname(__file__), "mirrors_full.html")


def read_mirrors_full():
    with open(MIRRORS_FULL, encoding="utf-8") as f:
        return f.read()


class MirrorListParserTestCase(unittest.TestCase):
    def setUp(self):
        self.text = read_mirrors_full()
        self.records = list(MirrorListParser().parse(self.text))
        self.by_site = dict((r.site, r) for r in self.records)

    def test_one_record_per_site_block(self):
        self.assertEqual(
            [r.site for r in self.records],
            [
                "ftp.at.debian.org",
                "mirror.arm.example.org",
                "ftp.de.debian.org",
                "broken.example.net",
                "ftp.us.debian.org",
            ],
        )

    def test_parse_is_a_generator(self):
        self.assertIsInstance(
            MirrorListParser().parse(self.text), types.GeneratorType
        )

    def test_blocks_without_site_are_dropped(self):
        text = (
            "<p>Just some text.</p>\n\n"
            "Packages over HTTP: http://orphan.example.org/debian/\n\n"
            "Site: a.example.org\n"
            "Packages over HTTP: http://a.example.org/debian/\n"
        )
        records = list(MirrorListParser().parse(text))
        self.assertEqual([r.site for r in records], ["a.example.org"])

    def test_record_count_grows_with_input(self):
        extra = "\n\nSite: extra.example.org\nPackages over FTP: ftp://extra.example.org/debian/\n"
        parser = MirrorListParser()
        before = len(list(parser.parse(self.text)))
        after = len(list(parser.parse(self.text + extra)))
        self.assertEqual(after, before + 1)
        self.assertEqual(len(list(parser.parse(self.text + "\n\n<p>no site</p>\n"))), before)

    def test_architectures(self):
        self.assertEqual(
            self.by_site["ftp.at.debian.org"].architectures, ("amd64", "arm64", "i386")
        )
        self.assertEqual(self.by_site["ftp.us.debian.org"].architectures, ("amd64", "i386"))
        self.assertIsNone(self.by_site["ftp.de.debian.org"].architectures)

    def test_missing_architectures_supports_everything(self):
        record = self.by_site["ftp.de.debian.org"]
        self.assertTrue(record.supports("amd64"))
        self.assertTrue(record.supports("s390x"))
        self.assertFalse(self.by_site["mirror.arm.example.org"].supports("amd64"))

    def test_urls_are_taken_once_through_markup(self):
        record = self.by_site["ftp.at.debian.org"]
        self.assertEqual(record.urls_for(MAIN, HTTP), ["http://ftp.at.debian.org/debian/"])
        self.assertEqual(record.urls_for(MAIN, FTP), ["ftp://ftp.at.debian.org/debian/"])

    def test_https_counts_as_http(self):
        record = self.by_site["ftp.us.debian.org"]
        self.assertEqual(record.urls_for(MAIN, HTTP), ["https://ftp.us.debian.org/debian/"])

    def test_nonus_is_not_main(self):
        record = self.by_site["ftp.de.debian.org"]
        self.assertEqual(record.urls_for(MAIN, HTTP), ["http://ftp.de.debian.org/debian/"])
        self.assertEqual(
            record.urls_for(NONUS, HTTP), ["http://ftp.de.debian.org/debian-non-US/"]
        )
        self.assertEqual(
            record.urls_for(NONUS, FTP), ["ftp://ftp.de.debian.org/debian-non-US/"]
        )
        self.assertEqual(record.urls_for(MAIN, FTP), [])

    def test_block_without_usable_url_does_not_stop_parsing(self):
        status = io.StringIO()
        parser = MirrorListParser(output=Output(verbosity=2, out=status))
        records = dict((r.site, r) for r in parser.parse(self.text))
        self.assertEqual(records["broken.example.net"].urls, ())
        self.assertIn("ftp.us.debian.org", records)
        self.assertIn("broken.example.net, none usable", status.getvalue())

    def test_labels_are_case_insensitive(self):
        text = (
            "SITE: upper.example.org\n"
            "PACKAGES OVER http: http://upper.example.org/debian/\n"
            "ARCHITECTURES: AMD64 I386\n"
        )
        record = next(MirrorListParser().parse(text))
        self.assertEqual(record.urls_for(MAIN, HTTP), ["http://upper.example.org/debian/"])
        self.assertTrue(record.supports("amd64"))

    def test_urls_before_the_label_are_ignored(self):
        text = (
            "Site: after.example.org\n"
            '<span title="http://before.example.org/debian/"></span>'
            'Packages over HTTP: <a href="http://after.example.org/debian/">'
            "http://after.example.org/debian/</a>\n"
            '<a href="ftp://before.example.org/debian/"></a>'
            "<b>Packages over</b> <i>FTP</i>: ftp://after.example.org/debian/\n"
        )
        record = next(MirrorListParser().parse(text))
        self.assertEqual(
            record.urls,
            (
                (MAIN, HTTP, "http://after.example.org/debian/"),
                (MAIN, FTP, "ftp://after.example.org/debian/"),
            ),
        )

    def test_bytes_and_crlf_input(self):
        text = self.text.replace("\n", "\r\n").encode("utf-8")
        self.assertEqual(len(list(MirrorListParser().parse(text))), 5)

    def test_only_requested_categories(self):
        parser = MirrorListParser(categories=(MAIN,))
        records = dict((r.site, r) for r in parser.parse(self.text))
        self.assertEqual(records["ftp.de.debian.org"].urls_for(NONUS, HTTP), [])
        self.assertEqual(
            records["ftp.de.debian.org"].urls_for(MAIN, HTTP),
            ["http://ftp.de.debian.org/debian/"],
        )

    def test_records_are_immutable(self):
        record = self.records[0]
        with self.assertRaises(AttributeError):
            record.site = "other"
