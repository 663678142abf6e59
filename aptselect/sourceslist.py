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

SECURITY_URL = "http://security.debian.org/"

COMMENT = "# "


def directive(kind, url, suite, sections, active=True):
    line = "%s %s %s %s" % (kind, url, suite, " ".join(sections))
    if active:
        return line
    return COMMENT + line


def render_sources_list(main, nonus, config):
    """Returns the sources.list text for the selected mirrors.

    @param main: selectors.Selection for the main archive
    @param nonus: selectors.Selection for the non-US archive, or None,
        only rendered when config.nonus is set
    @param config: configs.RenderConfig
    @rtype: string
    """
    distro = config.distro
    sections = config.sections

    lines = [
        "# Debian packages for %s" % distro,
        directive("deb", main.url, distro, sections),
        "# Uncomment the deb-src line if you want 'apt-get source'",
        "# to work with most packages.",
        directive("deb-src", main.url, distro, sections, config.sources),
        "",
    ]

    if config.nonus and nonus is not None:
        suite = distro + "/non-US"
        lines.extend([
            "# Non-US packages for %s, obsolete" % distro,
            directive("deb", nonus.url, suite, sections),
            directive("deb-src", nonus.url, suite, sections, config.sources),
            "",
        ])

    suite = distro + "/updates"
    if config.security:
        lines.append("# Security updates for %s" % distro)
    else:
        lines.append("# Security updates for %s, disabled" % distro)
    lines.extend([
        directive("deb", SECURITY_URL, suite, sections, config.security),
        directive("deb-src", SECURITY_URL, suite, sections,
                  config.security and config.sources),
    ])

    return "\n".join(lines) + "\n"
