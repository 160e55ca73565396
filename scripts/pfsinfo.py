#!/usr/bin/env python3
'''
Like readelf(1) but for PFS files: dump the header, the sections and the
footer of a container without extracting anything.
'''
import sys
import os
import logging

from pfsextractor.exceptions import UnpackException
from pfsextractor.firmware.pfs import PFSFile
from pfsextractor.firmware.pfs.info import resolve_names
from pfsextractor.firmware.pfs.utils import render_version


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.WARNING)
logger = logging.getLogger(__name__)


def usage(progname):
    print('usage: %s <pfs file>' % progname)
    sys.exit(1)


def dump_header(header):
    print(f'''PFS Header:
  Version:                           {header.header_version.value}
  Data size:                         0x{header.data_size.value:x} (bytes)''')


def dump_sections(sections):
    names = resolve_names(sections)

    print('''Sections:
  [Nr] Name                     GUID                                 Version      Data     DataSig  Meta     MetaSig''')
    for idx, section in enumerate(sections):
        version = render_version(section.version_type.value, section.version.value)
        print(f'''  [{idx + 1: >2d}] {names.get(idx, ""):<24} {section.guid!s} {version:<12} {section.data_size.value:08x} {section.data_sig_size.value:08x} {section.meta_size.value:08x} {section.meta_sig_size.value:08x}''')


def dump_footer(footer):
    print(f'''PFS Footer:
  Data size:                         0x{footer.data_size.value:x} (bytes)
  Checksum:                          0x{footer.checksum.value:08x}''')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    path = sys.argv[1]

    try:
        pfs, rest = PFSFile.decode(path)
    except UnpackException as e:
        print(f'{path}: not a PFS file: {e}')
        sys.exit(2)

    dump_header(pfs.header)
    dump_sections(pfs.sections.value)
    dump_footer(pfs.footer)

    if len(rest) > 0:
        print(f'Unparsed size: 0x{len(rest):x}')
