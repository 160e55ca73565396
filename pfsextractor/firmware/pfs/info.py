'''
Resolution of the names of the sections of a container.

The names come from the information section, i.e. the last section of the
container; the decoded sections are left untouched and the names are
returned as a table keyed by the position of the section.
'''
import logging
from typing import Dict, List

from . import PFSSection, decode_info
from ...exceptions import InfoSectionDecodeFailure


logger = logging.getLogger(__name__)

SECTION_INFO_NAME = 'Section Info'
MODEL_PROPERTIES_NAME = 'Model Properties'


def resolve_names(sections: List[PFSSection]) -> Dict[int, str]:
    names: Dict[int, str] = {}

    if not sections:
        return names

    info_index = len(sections) - 1
    info_section = sections[info_index]

    if info_section.data_size.value == 0:
        return names

    try:
        entries, rest = decode_info(info_section.data.value)
    except InfoSectionDecodeFailure as e:
        logger.warning('PFS info section parse error, falling back to generic names: %s', e)
        return names

    if len(rest) > 0:
        logger.info('Unparsed size: %X', len(rest))

    names[info_index] = SECTION_INFO_NAME

    assigned = 0
    for index, entry in zip(range(info_index), entries):
        names[index] = entry.section_name
        assigned += 1

    # FIXME: with exactly one name missing the last section before the information
    #        one becomes the model properties, it could be an off-by-one of the format tools
    if info_index > 0 and assigned == info_index - 1:
        names[assigned] = MODEL_PROPERTIES_NAME

    logger.debug('resolved names: %r', names)

    return names
