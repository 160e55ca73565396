'''
Where the artifacts end up: a directory next to the input file.
'''
import logging
from pathlib import Path


logger = logging.getLogger(__name__)

OUTPUT_DIRECTORY_SUFFIX = '.extracted'


def output_directory_for(path) -> Path:
    path = Path(path)
    return path.with_name(path.name + OUTPUT_DIRECTORY_SUFFIX)


def create_output_directory(path) -> Path:
    '''Create the directory for the artifacts of the file at path; it must not exist.'''
    directory = output_directory_for(path)
    directory.mkdir()
    logger.info('Directory created: %s', directory)

    return directory


class DirectoryWriter(object):
    '''Writer saving each artifact as a file in a directory.

    Nothing is ever overwritten: if the destination exists FileExistsError is raised.'''

    def __init__(self, directory):
        self.directory = Path(directory)

    def __call__(self, name, data):
        path = self.directory / name
        with open(path, 'xb') as f:
            f.write(data)

        logger.debug('written %s', path)
