'''
Command line to extract the contents of a PFS firmware update file.

    $ pfsextract.py firmware.bin

writes every artifact into the directory firmware.bin.extracted/; set the
environment variable DEBUG for a verbose log and PFS_MAX_DEPTH to change
how deep the containers can be nested.
'''
import logging
import os
import sys

from .exceptions import UnpackException, NestingDepthExceeded
from .firmware.pfs.extract import Extractor, MAX_DEPTH
from .output import create_output_directory, DirectoryWriter


logger = logging.getLogger(__name__)

EXIT_USAGE = 1
EXIT_OPEN = 2
EXIT_READ = 3
EXIT_OUTPUT_DIRECTORY = 4
EXIT_PARSE = 5
EXIT_EXTRACTION = 6


def usage(progname):
    print(f'''usage: {progname} <pfs file>

Extracts the contents of a firmware update file in PFS format into
the directory <pfs file>.extracted''')
    return EXIT_USAGE


def get_max_depth():
    value = os.environ.get('PFS_MAX_DEPTH')
    if value is None:
        return MAX_DEPTH

    return int(value)


def main(argv=None):
    argv = sys.argv if argv is None else argv

    if len(argv) < 2:
        return usage(argv[0])

    path = argv[1]

    try:
        max_depth = get_max_depth()
    except ValueError:
        logger.error('PFS_MAX_DEPTH must be an integer')
        return EXIT_USAGE

    logger.info('Obtained file path: %s', path)

    try:
        f = open(path, 'rb')
    except OSError as e:
        logger.error('Can\'t open %s: %s', path, e)
        return EXIT_OPEN

    with f:
        try:
            data = f.read()
        except OSError as e:
            logger.error('Can\'t read %s: %s', path, e)
            return EXIT_READ

    logger.info('Bytes read: 0x%X', len(data))

    try:
        directory = create_output_directory(path)
    except OSError as e:
        logger.error('Can\'t create the output directory: %s', e)
        return EXIT_OUTPUT_DIRECTORY

    extractor = Extractor(DirectoryWriter(directory), max_depth=max_depth)

    try:
        artifacts = extractor.extract(data)
    except UnpackException as e:
        logger.error('PFS file parse error, this file can\'t be parsed: %s', e)
        return EXIT_PARSE
    except NestingDepthExceeded as e:
        logger.error('%s', e)
        return EXIT_EXTRACTION
    except OSError as e:
        logger.error('Can\'t write the artifact: %s', e)
        return EXIT_EXTRACTION

    logger.info('%d artifacts extracted into %s', len(artifacts), directory)

    return 0
