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

from aptselect.connections import Connector
from aptselect.errors import RetrievalFailure
from aptselect.mirrorparser import MirrorListParser


def filter_hosts(records, category, protocol, arch):
	"""Returns the urls of category over protocol, in record order,
	from the records supporting arch. Records without an architecture
	list support every architecture. Duplicates are kept.

	@param records: iterable of MirrorRecord
	@param category: mirrorparser.MAIN or mirrorparser.NONUS
	@param protocol: mirrorparser.HTTP or mirrorparser.FTP
	@param arch: string, eg. 'amd64'
	@rtype: list
	"""
	candidates = []
	for record in records:
		if not record.supports(arch):
			continue
		candidates.extend(record.urls_for(category, protocol))
	return candidates


class Extractor:
	"""The Extractor employs a MirrorListParser object to get the list of
	mirrors, and keeps the parsed records. The candidates for one category
	are then filtered out of them with hosts()."""

	def __init__(self, settings, output, connector=None, parser=None):
		self.output = output

		self.proxies = {}

		for proxy in ['http_proxy', 'https_proxy']:
			prox = proxy.split('_')[0]
			if settings.proxy and prox + ":" in settings.proxy:
				self.proxies[prox] = settings.proxy
			elif os.getenv(proxy):
				self.proxies[prox] = os.getenv(proxy)

		self.connector = connector or Connector(self.output, self.proxies)
		parser = parser or MirrorListParser(output=self.output)

		mirrorlist = self.getlist(settings.url, settings.infile)

		# the parser is lazy, keep the records for more than one category
		self.records = list(parser.parse(mirrorlist))

		if not self.records:
			self.output.print_warn('The mirror list holds no Site: entries, '
				'it may not be a mirrors_full page: %s\n'
				% (settings.infile or settings.url))

		self.output.write('Extractor(): parsed %d mirrors\n'
			% len(self.records), 2)


	def hosts(self, category, protocol, arch):
		"""Returns the candidate urls for category and protocol on arch
		"""
		hosts = filter_hosts(self.records, category, protocol, arch)
		self.output.write('hosts(): %d candidates for %s over %s on %s\n'
			% (len(hosts), category, protocol, arch), 2)
		return hosts


	def getlist(self, url, infile=None):
		"""
		Returns the raw mirror list text. An existing infile is read
		instead of downloading, a missing one is written with the download.
		"""
		if infile and os.path.exists(infile):
			self.output.print_info('Using mirror list from %s\n' % infile)
			try:
				with open(infile, 'r', encoding='utf-8', errors='replace') as f:
					return f.read()
			except OSError as error:
				raise RetrievalFailure('Could not read the mirror list '
					'%s: %s' % (infile, error))

		self.output.write('getlist(): fetching ' + url + '\n', 2)

		self.output.print_info('Downloading a list of mirrors...\n')

		try:
			mirrorlist, timestamp = self.connector.fetch_content(url)
		except RetrievalFailure as error:
			raise RetrievalFailure('%s\nYou can download %s by hand and '
				'pass it with -i FILE.' % (error, url)) from error

		if not mirrorlist:
			raise RetrievalFailure('Could not get mirror list. '
				'Check your internet connection.')

		self.output.write('getlist(): list dated %s\n' % timestamp, 2)

		if infile:
			try:
				with open(infile, 'w', encoding='utf-8') as f:
					f.write(mirrorlist)
				self.output.write('getlist(): saved list to %s\n' % infile, 2)
			except OSError as error:
				self.output.print_warn('Could not save the mirror list to '
					'%s: %s\n' % (infile, error))

		return mirrorlist
