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

import requests
from requests.exceptions import RequestException, SSLError

from aptselect.errors import RetrievalFailure
from aptselect.version import version


USERAGENT = "aptselect-" + version


class Connector(object):
	"""Primary connection interface using the requests package
	"""

	def __init__(self, output, proxies, timeout=60):
		self.output = output
		self.proxies = proxies
		self.timeout = timeout
		self.headers = {'Accept-Charset': 'utf-8',
			'User-Agent': USERAGENT}


	def fetch_url(self, url, headers=None):
		"""Fetches the url

		@param url: string
		@param headers: dictionary, optional headers to use
		@rtype: requests.Response
		"""

		if not headers:
			headers = self.headers

		verify = url.startswith('https')
		self.output.write("Enabled ssl certificate verification: %s, for: %s\n"
			%(str(verify), url), 3)

		self.output.write('Connector.fetch_url(); headers = %s\n' %str(headers), 4)
		self.output.write('Connector.fetch_url(); connecting to opener\n', 2)

		try:
			connection = requests.get(
				url,
				headers=headers,
				verify=verify,
				proxies=self.proxies,
				timeout=self.timeout,
				)
		except SSLError as error:
			raise RetrievalFailure('Failed to download the '
				'mirror list from: %s\nSSLError was: %s'
				% (url, str(error)))
		except RequestException as error:
			raise RetrievalFailure('Failed to retrieve '
				'the mirror list from: %s\nError was: %s'
				% (url, str(error)))

		self.output.write('Connector.fetch_url() HEADERS = %s\n' %str(connection.headers), 4)
		self.output.write('Connector.fetch_url() Status_code = %i\n' % connection.status_code, 2)
		return connection


	@staticmethod
	def normalize_headers(headers):
		"""Map lower cased header names to the names the server sent
		"""
		return dict((x.lower(), x) for x in list(headers))


	def fetch_content(self, url):
		"""Fetch the mirror list

		@param url: string of the content to fetch
		@returns (content fetched as text, timestamp of fetched content)
		@raises RetrievalFailure: on any status other than 200
		"""

		connection = self.fetch_url(url, self.headers)

		headers = self.normalize_headers(connection.headers)

		if 'last-modified' in headers:
			timestamp = connection.headers[headers['last-modified']]
		elif 'date' in headers:
			timestamp = connection.headers[headers['date']]
		else:
			timestamp = None

		if connection.status_code not in [200]:
			raise RetrievalFailure('HTTP Status-Code was %s for url: %s'
				% (str(connection.status_code), url))

		self.output.write('New content downloaded for: %s\n'
			% url, 4)
		self.output.write('Last-modified: %s\n' % timestamp, 4)
		if not connection.encoding:
			connection.encoding = 'utf-8'
		return (connection.text, timestamp)
