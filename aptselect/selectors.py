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

import hashlib
import re
import subprocess
from collections import namedtuple

from aptselect.errors import MissingDependency, NoCandidates, ProbeUnreachable

NETSELECT = "netselect"

# netselect gives this score to hosts it could not reach
UNREACHABLE_SCORE = 9999

Selection = namedtuple("Selection", ["category", "protocol", "url", "ranked"])


# Given a string that is a URL or raw HOSTNAME or raw IP
# Extract that hostname/IP
def url_to_host(host_or_url):
    URL_RE = r"^(?P<protocol>[a-z0-9A-Z+-]+)(?:://)(?P<host_or_ip>[a-zA-Z0-9.-]+|\[[0-9a-fA-F:.]+\])(?:.*)?$"
    m = re.fullmatch(URL_RE, host_or_url)
    if m:
        host_without_proto = m.group("host_or_ip")
        return host_without_proto
    return host_or_url


def select_best(candidates, probe, category, protocol):
    """Runs the probe over the candidates and returns the winning Selection.

    The probe is any callable taking a list of urls and returning them
    ranked fastest first, an empty list when nothing answered.
    It is not called for an empty candidate list.

    @raises NoCandidates: no candidate to probe
    @raises ProbeUnreachable: the probe ranked none of them
    """
    candidates = list(candidates)
    if not candidates:
        raise NoCandidates(category, protocol)
    ranked = list(probe(candidates) or [])
    if not ranked:
        raise ProbeUnreachable(category, protocol)
    return Selection(category, protocol, ranked[0], tuple(ranked))


class Netselect:
    """handles rapid server selection via netselect"""

    def __init__(self, output, servers=10, hits=20, blocksize=None):
        self.output = output
        self._servers = servers
        self._hits = hits
        self._blocksize = blocksize

    def __call__(self, urls):
        """Returns the urls netselect could reach, fastest first,
        at most servers of them.
        """
        urls = list(urls)
        if self._blocksize is not None and len(urls) > self._blocksize:
            ranked = self.netselect_split(urls, self._servers, self._blocksize)
        else:
            self.output.print_info(
                "Using netselect to choose the top "
                "%d of %d mirrors...\n" % (self._servers, len(urls))
            )
            ranked = self.netselect(urls, self._servers)
            self.output.write("Done.\n")
        return [url for score, url in ranked]

    def netselect(self, hosts, number):
        """
        Uses Netselect to choose the closest hosts, _very_ quickly.
        Returns a list of (score, url), lowest score first.
        """
        # Netselect, for hosts with multiple IPs will return the IP directly.
        # For HTTP the Host header matters to reach the correct service,
        # so hand over the netselect tagged format HOSTNAME_OR_IP:TAG and
        # map the tag back to the url. URL:TAG is not supported.
        host_by_tag = dict()
        url_by_tag = dict()
        for host_or_url in hosts:
            # _ is just to make it easier to read
            tag = "_" + (hashlib.sha256(host_or_url.encode("utf-8")).hexdigest())[0:8]
            host_by_tag[tag] = url_to_host(host_or_url)
            url_by_tag[tag] = host_or_url

        tagged_hosts = [host + ":" + tag for tag, host in host_by_tag.items()]

        # Netselect resolves each hostname, and treats all the IPs seperately,
        # ask for more and keep the best score per tag.
        raw_number = number * 10
        cmd = [NETSELECT, "-s%d" % (raw_number,), "-t%d" % (self._hits,)]
        cmd.extend(tagged_hosts)

        self.output.write('\nnetselect(): running "%s"\n' % " ".join(cmd), 2)

        try:
            proc = subprocess.Popen(
                cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE
            )
        except OSError as e:
            raise MissingDependency(
                "Could not run %s: %s\n"
                "Install it with: apt-get install netselect" % (NETSELECT, e)
            )

        out, err = proc.communicate()

        if hasattr(out, "decode"):
            out = out.decode("utf-8", "replace")
        if hasattr(err, "decode"):
            err = err.decode("utf-8", "replace")

        if err:
            self.output.write("netselect(): netselect stderr: %s\n" % err, 2)

        # With tagged format, output is:
        # NNN HOST_OR_IP:TAG
        best = {}
        order = []
        for rawline in out.splitlines():
            line = rawline.split()
            if len(line) < 2:
                continue
            # Cannot use split on ":" if the output will contain IPv6!
            m = re.fullmatch(r"^(?P<host_or_ip>.+?):(?P<tag>_.+)\s*$", line[1])
            if not m or m.group("tag") not in url_by_tag:
                self.output.write(
                    "netselect(): ignoring line: %s\n" % rawline.strip(), 2
                )
                continue
            try:
                score = int(line[0])
            except ValueError:
                self.output.write(
                    "netselect(): ignoring line: %s\n" % rawline.strip(), 2
                )
                continue
            if score >= UNREACHABLE_SCORE:
                continue
            tag = m.group("tag")
            if tag not in best:
                order.append(tag)
                best[tag] = score
            elif score < best[tag]:
                best[tag] = score

        top_hosts = sorted(
            ((best[tag], url_by_tag[tag]) for tag in order),
            key=lambda pair: pair[0],
        )[:number]

        if not top_hosts and err:
            self.output.print_warn("netselect reported: %s\n" % err.strip())

        self.output.write("\nnetselect(): returning %s\n" % top_hosts, 2)

        return top_hosts

    def netselect_split(self, hosts, number, block_size):
        """
        This uses netselect to test mirrors in chunks,
        each at most block_size in length.
        This is done in a tournament style.
        """
        self.output.write("netselect_split() got %s hosts.\n" % len(hosts), 2)

        host_blocks = self.host_blocks(hosts, block_size)

        self.output.write(" split into %s blocks\n" % len(host_blocks), 2)

        ret_hosts = []

        block_index = 0
        for block in host_blocks:
            self.output.print_info(
                "Using netselect to choose the top "
                "%d hosts, in blocks of %s. %s of %s blocks complete."
                % (number, block_size, block_index, len(host_blocks))
            )

            block_hosts = self.netselect(block, len(block))

            self.output.write(
                "\nran netselect(%s, %s), and got %s\n"
                % (block, len(block), block_hosts),
                2,
            )

            ret_hosts.extend(block_hosts)
            block_index += 1

        self.output.print_info(
            "Using netselect to choose the top "
            "%d hosts, in blocks of %s. %s of %s blocks complete.\n"
            % (number, block_size, block_index, len(host_blocks))
        )

        top_hosts = sorted(ret_hosts, key=lambda pair: pair[0])[:number]

        self.output.write("netselect_split(): returns %s\n" % top_hosts, 2)

        return top_hosts

    def host_blocks(self, hosts, block_size):
        """
        Takes a list of hosts and a block size,
        and returns an list of lists of URLs.
        Each of the sublists is at most block_size in length.
        """
        host_array = [
            hosts[i:i + block_size] for i in range(0, len(hosts), block_size)
        ]

        self.output.write(
            "\nhost_blocks(): returns "
            "%s blocks, each about %s in size\n"
            % (len(host_array), len(host_array[0]) if host_array else 0),
            2,
        )

        return host_array
