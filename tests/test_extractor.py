# Copyright 2024-2026 Aptselect Authors

import io
import os
import shutil
import tempfile
import unittest
from unittest import mock

from aptselect.configs import DEFAULTS, Settings
from aptselect.errors import RetrievalFailure
from aptselect.extractor import Extractor, filter_hosts
from aptselect.mirrorparser import FTP, HTTP, MAIN, NONUS, MirrorListParser
from aptselect.output import Output


MIRRORS_FULL = os.path.join(os.path.dirname(__file__), "mirrors_full.html")


def read_mirrors_full():
    with open(MIRRORS_FULL, encoding="utf-8") as f:
        return f.read()


def make_settings(**values):
    settings = dict(DEFAULTS, arch="amd64")
    settings.update(values)
    return Settings(**settings)


class FilterHostsTestCase(unittest.TestCase):
    def setUp(self):
        self.records = list(MirrorListParser().parse(read_mirrors_full()))

    def test_main_http_amd64_in_record_order(self):
        self.assertEqual(
            filter_hosts(self.records, MAIN, HTTP, "amd64"),
            [
                "http://ftp.at.debian.org/debian/",
                "http://ftp.de.debian.org/debian/",
                "https://ftp.us.debian.org/debian/",
            ],
        )

    def test_architecture_mismatch_is_excluded(self):
        hosts = filter_hosts(self.records, MAIN, HTTP, "amd64")
        self.assertNotIn("http://mirror.arm.example.org/debian/", hosts)
        self.assertIn(
            "http://mirror.arm.example.org/debian/",
            filter_hosts(self.records, MAIN, HTTP, "arm64"),
        )

    def test_no_declared_architectures_matches_anything(self):
        self.assertEqual(
            filter_hosts(self.records, MAIN, HTTP, "s390x"),
            ["http://ftp.de.debian.org/debian/"],
        )

    def test_never_returns_a_record_excluding_the_arch(self):
        for arch in ("amd64", "arm64", "i386", "armhf", "mips64el"):
            hosts = filter_hosts(self.records, MAIN, HTTP, arch)
            for record in self.records:
                if record.architectures is not None and arch not in record.architectures:
                    for url in record.urls_for(MAIN, HTTP):
                        self.assertNotIn(url, hosts)

    def test_ftp_and_nonus(self):
        self.assertEqual(
            filter_hosts(self.records, MAIN, FTP, "amd64"),
            ["ftp://ftp.at.debian.org/debian/"],
        )
        self.assertEqual(
            filter_hosts(self.records, NONUS, HTTP, "amd64"),
            ["http://ftp.de.debian.org/debian-non-US/"],
        )

    def test_duplicates_pass_through(self):
        records = self.records + self.records[:1]
        hosts = filter_hosts(records, MAIN, HTTP, "amd64")
        self.assertEqual(hosts.count("http://ftp.at.debian.org/debian/"), 2)


class ExtractorTestCase(unittest.TestCase):
    def setUp(self):
        self.tempdir = tempfile.mkdtemp()
        self.output = Output(out=io.StringIO())
        self.connector = mock.Mock()
        self.connector.fetch_content.return_value = (
            read_mirrors_full(),
            "Sat, 17 Oct 2026 08:12:01 GMT",
        )

    def tearDown(self):
        shutil.rmtree(self.tempdir)

    def test_existing_infile_is_read(self):
        infile = os.path.join(self.tempdir, "mirrors_full")
        shutil.copy(MIRRORS_FULL, infile)
        extractor = Extractor(
            make_settings(infile=infile), self.output, connector=self.connector
        )
        self.assertEqual(len(extractor.records), 5)
        self.connector.fetch_content.assert_not_called()

    def test_download_is_saved_to_missing_infile(self):
        infile = os.path.join(self.tempdir, "mirrors_full")
        extractor = Extractor(
            make_settings(infile=infile), self.output, connector=self.connector
        )
        self.connector.fetch_content.assert_called_once_with(DEFAULTS["url"])
        self.assertEqual(len(extractor.records), 5)
        with open(infile, encoding="utf-8") as f:
            self.assertEqual(f.read(), read_mirrors_full())

    def test_hosts(self):
        extractor = Extractor(make_settings(), self.output, connector=self.connector)
        self.assertEqual(
            extractor.hosts(MAIN, FTP, "amd64"), ["ftp://ftp.at.debian.org/debian/"]
        )

    def test_fetch_failure_suggests_manual_download(self):
        self.connector.fetch_content.side_effect = RetrievalFailure("boom")
        with self.assertRaises(RetrievalFailure) as cm:
            Extractor(make_settings(), self.output, connector=self.connector)
        self.assertIn("-i FILE", str(cm.exception))

    def test_list_without_mirrors_warns(self):
        status = io.StringIO()
        self.connector.fetch_content.return_value = ("<html>maintenance</html>", None)
        extractor = Extractor(
            make_settings(), Output(out=status), connector=self.connector
        )
        self.assertEqual(extractor.records, [])
        self.assertEqual(extractor.hosts(MAIN, HTTP, "amd64"), [])
        self.assertIn("no Site: entries", status.getvalue())

    def test_proxy_option(self):
        extractor = Extractor(
            make_settings(proxy="http://proxy.example.org:3128"),
            self.output,
            connector=self.connector,
        )
        self.assertEqual(extractor.proxies["http"], "http://proxy.example.org:3128")
