import logging

from . import PFSVersionType


logger = logging.getLogger(__name__)

DEFAULT_VERSION = '0.'


def render_version(version_type, version):
    '''Render the version of a section scanning the types and the numbers
    in lockstep: 'A' elements are hexadecimal, 'N' decimal, a space or
    a zero byte ends the version. An unknown type makes the whole version
    unreadable.'''
    rendered = ''

    for tag, number in zip(bytes(version_type), version):
        try:
            kind = PFSVersionType(tag)
        except ValueError:
            logger.warning('Unknown version type found: %X', tag)
            rendered = ''
            break

        if kind == PFSVersionType.ALPHANUMERIC:
            rendered += '%X.' % number
        elif kind == PFSVersionType.NUMERIC:
            rendered += '%d.' % number
        else:
            break

    return rendered or DEFAULT_VERSION


def section_label(index, name):
    '''The index is 1-based; unnamed sections get a generic label.'''
    if not name:
        return f'section_{index}'

    return '%d_%s' % (index, name.replace(' ', '_'))


def artifact_name(prefix, label, version, suffix):
    return f'{prefix}{label}_{version}{suffix}'


def nested_prefix(prefix, label, version):
    return f'{prefix}{label}_{version}_'
