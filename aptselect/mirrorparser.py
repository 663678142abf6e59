#!/usr/bin/env python3

"""Aptselect 1.x
 Tool for selecting the fastest Debian mirror and writing sources.list.

Copyright 2024-2026 Aptselect Authors

Distributed under the terms of the GNU General Public License v2
 This program is free software; you can redistribute it and/or modify
 it under the terms of the GNU General Public License as published by
 the Free Software Foundation, version 2 of the License.

 This program is distributed in the hope that it will be useful,
 but WITHOUT ANY WARRANTY; without even the implied warranty of
 MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
 GNU General Public License for more details.

 You should have received a copy of the GNU General Public License
 along with this program; if not, write to the Free Software
 Foundation, Inc., 51 Franklin St, Fifth Floor, Boston, MA 02110-1301, USA.

"""

import html
import re
from collections import namedtuple

MIRRORS_FULL = "https://www.debian.org/mirror/mirrors_full"

MAIN = "Packages"
NONUS = "Non-US packages"
CATEGORIES = (MAIN, NONUS)

HTTP = "HTTP"
FTP = "FTP"
PROTOCOLS = (HTTP, FTP)

# url schemes accepted for each protocol label
SCHEMES = {
    HTTP: ("http", "https"),
    FTP: ("ftp",),
}

BLOCK_SEPARATOR_RE = re.compile(r"\n[ \t]*\n")
BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
TAG_RE = re.compile(r"<[^>]*>")
SITE_RE = re.compile(r"^\s*site\s*:\s*(?P<site>\S*)", re.IGNORECASE)
ARCH_RE = re.compile(
    r"^\s*(?:includes\s+)?architectures\s*:(?P<archs>.*)$", re.IGNORECASE
)
FIELD_RE = re.compile(
    r"^\s*(?P<category>non-us\s+packages|packages)\s+over\s+"
    r"(?P<protocol>http|ftp)\s*:",
    re.IGNORECASE,
)
URL_RE = re.compile(r"(?P<scheme>[a-z][a-z0-9+.-]*)://[^\s\"'<>]+", re.IGNORECASE)
# end of a field label in the raw line, markup allowed between the words
LABEL_END_RE = re.compile(
    r"over(?:\s|&nbsp;|<[^>]*>)+(?:http|ftp)(?:\s|&nbsp;|<[^>]*>)*:", re.IGNORECASE
)


class MirrorRecord(namedtuple("MirrorRecord", ["site", "architectures", "urls"])):
    """One mirror of the directory.

    site: the host name given after the Site: marker
    architectures: tuple of lower cased architecture names,
        or None when the block does not restrict them
    urls: tuple of (category, protocol, url) triples, in document order
    """

    __slots__ = ()

    def supports(self, arch):
        if self.architectures is None:
            return True
        return arch.lower() in self.architectures

    def urls_for(self, category, protocol):
        return [
            url for cat, proto, url in self.urls if cat == category and proto == protocol
        ]


def strip_tags(text):
    return html.unescape(TAG_RE.sub("", text))


class MirrorListParser:
    """Turns the mirrors_full directory listing into MirrorRecords.

    The listing is loosely structured text: one blank line separated
    block per mirror, a "Site:" line, an optional architectures line,
    and "<category> over <protocol>:" lines holding the urls, all of it
    possibly wrapped in html markup.
    """

    def __init__(self, categories=CATEGORIES, output=None):
        self._categories = tuple(c.lower() for c in categories)
        self.output = output

    def _debug(self, message):
        if self.output is not None:
            self.output.write(message, 2)

    def parse(self, text):
        """Yields one MirrorRecord per block carrying a site marker.

        @param text: the whole listing, str or bytes
        @rtype: generator of MirrorRecord
        """
        if isinstance(text, bytes):
            text = text.decode("utf-8", "replace")
        text = text.replace("\r\n", "\n")
        for block in BLOCK_SEPARATOR_RE.split(text):
            record = self._parse_block(block)
            if record is None:
                continue
            if not record.urls:
                self._debug(
                    "parse(): skipping urls of %s, none usable\n" % record.site
                )
            yield record

    def _parse_block(self, block):
        site = None
        architectures = None
        urls = []
        for raw in BREAK_RE.sub("\n", block).splitlines():
            line = strip_tags(raw)
            if site is None:
                m = SITE_RE.match(line)
                if m:
                    site = m.group("site")
                    continue
            m = ARCH_RE.match(line)
            if m:
                archs = tuple(
                    a.lower() for a in re.split(r"[\s,]+", m.group("archs")) if a
                )
                architectures = archs or None
                continue
            m = FIELD_RE.match(line)
            if m:
                urls.extend(self._field_urls(m, raw))
        if site is None:
            return None
        return MirrorRecord(site, architectures, tuple(urls))

    def _field_urls(self, match, raw):
        label = " ".join(match.group("category").lower().split())
        if label not in self._categories:
            return []
        category = NONUS if label.startswith("non-us") else MAIN
        protocol = match.group("protocol").upper()
        label_end = LABEL_END_RE.search(raw)
        if label_end is None:
            return []
        found = []
        # the url usually appears twice, as href and as link text
        for m in URL_RE.finditer(raw, label_end.end()):
            url = m.group(0)
            if m.group("scheme").lower() not in SCHEMES[protocol]:
                continue
            if (category, protocol, url) not in found:
                found.append((category, protocol, url))
        return found


if __name__ == "__main__":
    import sys
    import urllib.request

    parser = MirrorListParser()
    for record in parser.parse(urllib.request.urlopen(MIRRORS_FULL).read()):
        print(record.site, record.architectures, record.urls_for(MAIN, HTTP))
    sys.exit(0)
