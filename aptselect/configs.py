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
import platform
import shutil
import subprocess
import time
from collections import namedtuple

from aptselect.errors import UsageError
from aptselect.mirrorparser import MIRRORS_FULL


DISTRIBUTIONS = ('stable', 'testing', 'unstable', 'sid', 'experimental',
	'oldstable', 'bullseye', 'bookworm', 'trixie', 'forky')

# security updates are only enabled for this exact name
SECURITY_DISTRO = 'stable'

DEFAULTS = {
	'arch': None,
	'sources': False,
	'nonfree': False,
	'ftp': False,
	'nonus': False,
	'security': True,
	'infile': None,
	'outfile': 'sources.list',
	'distro': 'stable',
	'url': MIRRORS_FULL,
	'proxy': None,
	'tests': 10,
	'hits': 20,
	'blocksize': None,
	}

ENVIRONMENT = {
	'arch': 'APTSELECT_ARCH',
	'sources': 'APTSELECT_SOURCES',
	'nonfree': 'APTSELECT_NONFREE',
	'ftp': 'APTSELECT_FTP',
	'nonus': 'APTSELECT_NONUS',
	'security': 'APTSELECT_SECURITY',
	'infile': 'APTSELECT_INFILE',
	'outfile': 'APTSELECT_OUTFILE',
	'distro': 'APTSELECT_DISTRO',
	'url': 'APTSELECT_URL',
	}

Settings = namedtuple('Settings', sorted(DEFAULTS))

RenderConfig = namedtuple('RenderConfig', ['sources', 'nonfree', 'nonus',
	'security', 'distro', 'sections'])

MACHINE_ARCH = {
	'x86_64': 'amd64',
	'amd64': 'amd64',
	'i386': 'i386',
	'i486': 'i386',
	'i586': 'i386',
	'i686': 'i386',
	'aarch64': 'arm64',
	'arm64': 'arm64',
	'armv7l': 'armhf',
	'armv6l': 'armel',
	'ppc64le': 'ppc64el',
	's390x': 's390x',
	'riscv64': 'riscv64',
	'mips64': 'mips64el',
	}

TRUE = ('1', 'yes', 'true', 'on')
FALSE = ('0', 'no', 'false', 'off', '')


def parse_bool(name, value):
	value = value.strip().lower()
	if value in TRUE:
		return True
	if value in FALSE:
		return False
	raise UsageError('%s: expected a boolean (yes/no), got "%s"'
		% (name, value))


def get_host_arch(output):
	"""Returns the Debian architecture name of this machine.
	Asks dpkg when it is installed, otherwise guesses from the machine type.
	"""
	try:
		arch = subprocess.check_output(['dpkg', '--print-architecture'],
			stderr=subprocess.DEVNULL)
		return arch.decode('utf-8').strip()
	except (OSError, subprocess.CalledProcessError) as error:
		output.write('get_host_arch(): dpkg failed: %s\n' % error, 2)
	machine = platform.machine().lower()
	return MACHINE_ARCH.get(machine, machine)


def get_settings(options, output, environ=None):
	"""Assembles the run settings from the built-in defaults,
	then the APTSELECT_* environment, then the command line.

	@param options: optparse Values, None meaning "not given"
	@param output: aptselect.output.Output instance
	@param environ: mapping, defaults to os.environ
	@rtype: Settings
	"""
	if environ is None:
		environ = os.environ

	values = dict(DEFAULTS)

	for key, var in ENVIRONMENT.items():
		# an empty variable counts as unset
		if not environ.get(var, '').strip():
			continue
		if isinstance(DEFAULTS[key], bool):
			values[key] = parse_bool(var, environ[var])
		else:
			values[key] = environ[var].strip()
		output.write('get_settings(): %s=%s from %s\n'
			% (key, values[key], var), 2)

	for key in DEFAULTS:
		value = getattr(options, key, None)
		if value is not None:
			values[key] = value

	if values['distro'] not in DISTRIBUTIONS:
		raise UsageError('Unknown distribution "%s", choose one of: %s'
			% (values['distro'], ', '.join(DISTRIBUTIONS)))

	for key in ('tests', 'hits', 'blocksize'):
		if values[key] is not None and values[key] < 1:
			raise UsageError('--%s must be a positive number' % key)

	if not values['arch']:
		values['arch'] = get_host_arch(output)

	return Settings(**values)


def get_render_config(settings):
	"""Returns the RenderConfig for the sources.list of these settings.
	Security updates are forced off for every distribution but stable.
	"""
	sections = ['main', 'contrib']
	if settings.nonfree:
		sections.append('non-free')
	return RenderConfig(
		sources=settings.sources,
		nonfree=settings.nonfree,
		nonus=settings.nonus,
		security=settings.security and settings.distro == SECURITY_DISTRO,
		distro=settings.distro,
		sections=tuple(sections),
		)


def write_sources_list(output, config_path, text):
	"""Writes the new sources.list, moving an existing one aside first

	@param output: file, or output to print messages to
	@param config_path: string
	@param text: the rendered sources.list
	@returns the path of the backup, or None
	"""
	backup = None
	output.write('\n')
	if os.path.lexists(config_path):
		stamp = int(time.time())
		backup = '%s.%d' % (config_path, stamp)
		while os.path.lexists(backup):
			stamp += 1
			backup = '%s.%d' % (config_path, stamp)
		output.print_info('%s exists, moving it to %s\n'
			% (config_path, backup))
		shutil.move(config_path, backup)

	output.print_info('Writing new %s\n' % config_path)

	with open(config_path, 'w') as config:
		config.write(text)

	output.print_info('Done.\n')
	return backup
