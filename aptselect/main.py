#!/usr/bin/env python
#-*- coding:utf-8 -*-


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


import os
import sys
from optparse import OptionParser
from aptselect.output import Output, ColoredFormatter
from aptselect.errors import (AptSelectError, MissingDependency, UsageError,
	EXIT_OK)
from aptselect.extractor import Extractor
from aptselect.mirrorparser import MAIN, NONUS, HTTP, FTP
from aptselect.selectors import Netselect, NETSELECT, select_best
from aptselect.configs import (DISTRIBUTIONS, get_settings,
	get_render_config, write_sources_list)
from aptselect.sourceslist import render_sources_list
from aptselect.version import version


class AptSelectOptionParser(OptionParser):
	'''OptionParser raising UsageError instead of exiting'''

	def error(self, msg):
		raise UsageError(msg)


class AptSelect(object):
	'''Main operational class'''

	def __init__(self, output=None, probe=None, connector=None):
		'''AptSelect class init

		@param output: aptselect.output.Output() class instance
			or None for the default instance
		@param probe: callable ranking a list of urls, fastest first,
			or None to run netselect
		@param connector: aptselect.connections.Connector() instance
			or None for the default one
		'''
		self.output = output or Output()
		self.probe = probe
		self.connector = connector
		self.parser = None


	@staticmethod
	def _have_bin(name):
		"""Determines whether a particular binary is available
		on the host system.  It searches in the PATH environment
		variable paths.

		@param name: string, binary name to search for
		@rtype: string or None
		"""
		for path_dir in os.environ.get("PATH", "").split(":"):
			if not path_dir:
				continue
			file_path = os.path.join(path_dir, name)
			if os.path.isfile(file_path) and os.access(file_path, os.X_OK):
				return file_path
		return None


	def change_config(self, text, outfile):
		"""Writes the sources.list to the given file, or to stdout.

		@param text: the rendered sources.list
		@param outfile: string, '-' for stdout
		"""
		if outfile == '-':
			sys.stdout.write(text)
			sys.stdout.flush()
			return
		try:
			write_sources_list(self.output, outfile, text)
		except OSError as error:
			raise AptSelectError('Could not write %s: %s' % (outfile, error))
		self.output.print_info('Review %s, then copy it to '
			'/etc/apt/sources.list\n' % outfile)


	def _parse_args(self, argv):
		"""
		Does argument parsing and some sanity checks.
		Returns an optparse Options object, options not given are None.
		"""
		desc = "\n".join((
			self.output.white("examples:"),
			"",
			"		 $ aptselect",
			"		 $ aptselect -s -n -o /tmp/sources.list testing",
			"		 $ aptselect -f -a arm64 -b10 stable",
			"",
			self.output.white("distributions:"),
			"		 " + ", ".join(DISTRIBUTIONS),
			))

		parser = AptSelectOptionParser(
			usage="%prog [options] [distribution]",
			formatter=ColoredFormatter(self.output), description=desc,
			version='Aptselect version: %s' % version)
		self.parser = parser

		group = parser.add_option_group("Sources.list content")
		group.add_option(
			"-a", "--arch", action="store", default=None,
			help="Use mirrors carrying this architecture. "
			"Defaults to the one dpkg reports.")
		group.add_option(
			"-s", "--sources", action="store_true", default=None,
			help="Enable the deb-src lines.")
		group.add_option(
			"-n", "--nonfree", action="store_true", default=None,
			help="Add the non-free section.")
		group.add_option(
			"-u", "--nonus", action="store_true", default=None,
			help="(obsolete) Also select a non-US mirror. "
			"The non-US archive no longer exists, only use this for "
			"very old releases.")

		group = parser.add_option_group("Mirror selection")
		group.add_option(
			"-f", "--ftp", action="store_true", default=None,
			help="Use FTP mirrors instead of HTTP ones.")
		group.add_option(
			"-t", "--tests", action="store", type="int", default=None,
			help="Number of fastest mirrors to report. Defaults to 10.")
		group.add_option(
			"-b", "--blocksize", action="store", type="int", default=None,
			help="Split the hosts into blocks of BLOCKSIZE for "
			"use with netselect. This is required for certain "
			"routers which block 40+ requests at any given time. "
			"Recommended parameter is: -b10")
		group.add_option(
			"--hits", action="store", type="int", default=None,
			help="Number of probes netselect sends to each host. "
			"Defaults to 20.")

		group = parser.add_option_group("Files")
		group.add_option(
			"-i", "--infile", action="store", default=None,
			help="Read the mirror list from INFILE. When INFILE "
			"does not exist, the list is downloaded and saved there.")
		group.add_option(
			"-o", "--outfile", action="store", default=None,
			help="Write the result to OUTFILE, '-' for stdout. "
			"Defaults to ./sources.list, an existing file is "
			"moved aside first.")
		group.add_option(
			"-l", "--list-url", action="store", dest="url", default=None,
			help="Download the mirror list from this url.")
		group.add_option(
			"-P", "--proxy", action="store",
			default=None,
			help="Proxy server to use if not the default proxy "
				"in the environment")

		group = parser.add_option_group("Other options")
		group.add_option(
			"-d", "--debug", action="store", type="int", dest="verbosity",
			default=1, help="debug mode, pass in the debug level [1-9]")
		group.add_option(
			"-q", "--quiet", action="store_const", const=0, dest="verbosity",
			help="Quiet mode")

		options, args = parser.parse_args(argv[1:])

		# sanity checks

		if len(args) > 1:
			raise UsageError('Unexpected arguments passed: %s'
				% ' '.join(args[1:]))

		options.distro = args[0] if args else None

		# return results
		return options


	def get_probe(self, settings):
		'''Returns the injected probe, or a netselect one

		@raises MissingDependency: when netselect is not installed
		'''
		if self.probe is not None:
			return self.probe
		if not self._have_bin(NETSELECT):
			raise MissingDependency(
				'You do not appear to have netselect on your system. '
				'Install it with: apt-get install netselect')
		return Netselect(self.output, settings.tests, settings.hits,
			settings.blocksize)


	def select_url(self, extractor, category, protocol, settings, probe):
		'''Returns the Selection of the fastest mirror for the category

		@param extractor: Extractor instance holding the parsed mirrors
		@rtype: selectors.Selection
		'''
		hosts = extractor.hosts(category, protocol, settings.arch)
		self.output.print_info('%d mirrors offer %s over %s for %s.\n'
			% (len(hosts), category, protocol, settings.arch))
		selection = select_best(hosts, probe, category, protocol)

		ranked = selection.ranked[:settings.tests]
		self.output.write('\nThe fastest %d servers seem to be:\n\n'
			% len(ranked))
		for url in ranked:
			self.output.write('\t%s\n' % url)
		self.output.write('\nOf the hosts tested we choose the fastest '
			'valid for %s:\n\t%s\n\n' % (protocol, selection.url))
		return selection


	def run(self, argv):
		"""Runs the whole selection, raising AptSelectError on failure

		@param argv: list of command line arguments to parse
		"""
		options = self._parse_args(argv)
		self.output.verbosity = options.verbosity
		settings = get_settings(options, self.output)
		self.output.write('run(); settings = %s\n' % str(settings), 2)

		probe = self.get_probe(settings)

		extractor = Extractor(settings, self.output, connector=self.connector)

		protocol = FTP if settings.ftp else HTTP
		main = self.select_url(extractor, MAIN, protocol, settings, probe)

		nonus = None
		if settings.nonus:
			self.output.print_warn('non-US support is obsolete, the archive '
				'only exists for old releases.\n')
			nonus = self.select_url(extractor, NONUS, protocol, settings, probe)

		text = render_sources_list(main, nonus, get_render_config(settings))
		self.change_config(text, settings.outfile)


	def main(self, argv):
		"""Lets Rock!

		@param argv: list of command line arguments to parse
		@returns 0, failures exit through Output.print_err
		"""
		try:
			self.run(argv)
		except AptSelectError as error:
			if isinstance(error, UsageError) and self.parser is not None:
				self.output.write(self.parser.get_usage(), 0)
			self.output.print_err(str(error), status=error.status)
		return EXIT_OK
