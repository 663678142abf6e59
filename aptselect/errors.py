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

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_MISSING_DEPENDENCY = 3
EXIT_RETRIEVAL = 4
EXIT_NO_MIRROR = 5


class AptSelectError(Exception):
    """Base class for the fatal errors of a run.
    Each subclass carries the exit status main() reports it with."""

    status = EXIT_ERROR


class UsageError(AptSelectError):
    status = EXIT_USAGE


class MissingDependency(AptSelectError):
    status = EXIT_MISSING_DEPENDENCY


class RetrievalFailure(AptSelectError):
    status = EXIT_RETRIEVAL


class SelectionFailure(AptSelectError):
    """No mirror could be recommended for a category."""

    status = EXIT_NO_MIRROR

    def __init__(self, category, protocol, message=None):
        self.category = category
        self.protocol = protocol
        AptSelectError.__init__(self, message or self.describe())

    def describe(self):
        return "no mirror selected for %s over %s" % (self.category, self.protocol)


class NoCandidates(SelectionFailure):
    def describe(self):
        return (
            "No mirror in the list offers %s over %s for this architecture.\n"
            "Check the --arch and --ftp settings, or try another mirror list."
            % (self.category, self.protocol)
        )


class ProbeUnreachable(SelectionFailure):
    def describe(self):
        return (
            "netselect could not reach any of the mirrors offering %s over %s.\n"
            "You may be behind a firewall that blocks the ICMP/UDP packets "
            "netselect relies on.\nTry again using block mode (-b10), or "
            "from a different network." % (self.category, self.protocol)
        )
