'''
# PFS firmware container

Format used to bundle firmware update payloads. Everything is little endian.

  .-----------------------------.
  | header "PFS.HDR."           |
  | section 1                   |
  | section 2                   |
  |  ...                        |
  | section N (information)     |
  | footer "PFS.FTR."           |
  '-----------------------------'

Each section carries up to four blobs (data, data signature, metadata and
metadata signature); the data can be a zlib-compressed section, a nested
container whose sections are chunks to be reassembled, or opaque data.

The last section of a container, the information section, has for data a
sequence of records naming the sections before it.
'''
from enum import Enum
import logging

from ...core import Chunk
from ... import fields
from ...properties import Dependency, ScaledDependency
from ...streams import Stream
from ...exceptions import UnpackException, ChunkDecodeFailure, InfoSectionDecodeFailure


logger = logging.getLogger(__name__)

PFS_HEADER_MAGIC = b'PFS.HDR.'
PFS_FOOTER_MAGIC = b'PFS.FTR.'
PFS_COMPRESSED_SECTION_MAGIC = b'\xAA\xEE\xAA\x76\x1B\xEC\xBB\x20\xF1\xE6\x51'

PFS_CHUNK_ORDER_NUMBER_OFFSET = 0x3E
PFS_CHUNK_HEADER_SIZE = 0x248


class PFSVersionType(Enum):
    '''How each element of a version must be rendered.'''
    ALPHANUMERIC = 0x41  # 'A', hexadecimal
    NUMERIC      = 0x4E  # 'N', decimal
    SPACE        = 0x20  # terminator
    NONE         = 0x00  # terminator


class GUID(Chunk):
    data1 = fields.StructField('I')
    data2 = fields.StructField('H')
    data3 = fields.StructField('H')
    data4 = fields.StringField(8)

    def __str__(self):
        data4 = bytes(self.data4.value).hex().upper()
        return '%08X-%04X-%04X-%s-%s' % (
            self.data1.value,
            self.data2.value,
            self.data3.value,
            data4[:4],
            data4[4:],
        )


class PFSHeader(Chunk):
    magic          = fields.StringField(8, default=PFS_HEADER_MAGIC, is_magic=True)
    header_version = fields.StructField('I')
    data_size      = fields.StructField('I')


class PFSFooter(Chunk):
    data_size = fields.StructField('I')
    checksum  = fields.StructField('I')  # not verified
    magic     = fields.StringField(8, default=PFS_FOOTER_MAGIC, is_magic=True)


class PFSSection(Chunk):
    '''
    A section has a fixed header followed by four blobs, each one present
    only if the corresponding size is not zero.

    The blobs are memoryview over the buffer the section was unpacked from.
    '''
    guid           = GUID()
    header_version = fields.StructField('I')
    version_type   = fields.StringField(4)
    version        = fields.StructField('4H', default=(0, 0, 0, 0))
    reserved       = fields.StructField('Q')
    data_size      = fields.StructField('I')
    data_sig_size  = fields.StructField('I')
    meta_size      = fields.StructField('I')
    meta_sig_size  = fields.StructField('I')
    unknown        = fields.StringField(16)
    data           = fields.StringField(Dependency('.data_size'), optional=True)
    data_sig       = fields.StringField(Dependency('.data_sig_size'), optional=True)
    meta           = fields.StringField(Dependency('.meta_size'), optional=True)
    meta_sig       = fields.StringField(Dependency('.meta_sig_size'), optional=True)


def footer_follows(array, stream):
    '''Terminator for the list of sections: True if a footer starts at the actual offset.'''
    stream.save()
    try:
        PFSFooter().unpack(stream)
    except UnpackException:
        return False
    finally:
        stream.restore()

    return True


class PFSFile(Chunk):
    header   = PFSHeader()
    sections = fields.ArrayField(PFSSection, until=footer_follows)
    footer   = PFSFooter()


class PFSCompressedSection(Chunk):
    payload_size = fields.StructField('I')
    magic        = fields.StringField(len(PFS_COMPRESSED_SECTION_MAGIC), default=PFS_COMPRESSED_SECTION_MAGIC, is_magic=True)
    padding      = fields.StringField(1)
    payload      = fields.StringField(Dependency('.payload_size'))  # zlib stream
    trailer      = fields.StringField(16)  # not validated


class PFSChunk(Chunk):
    '''Piece of the data of a section that is itself a container: the
    pieces must be concatenated following the order number.'''
    preamble     = fields.StringField(PFS_CHUNK_ORDER_NUMBER_OFFSET)
    order_number = fields.StructField('H')
    header_rest  = fields.StringField(PFS_CHUNK_HEADER_SIZE - PFS_CHUNK_ORDER_NUMBER_OFFSET - 2)
    payload      = fields.PaddingField()


class PFSInfoEntry(Chunk):
    header_version = fields.StructField('I')
    guid           = GUID()
    version        = fields.StructField('4H', default=(0, 0, 0, 0))
    version_type   = fields.StringField(4)
    name_length    = fields.StructField('H')  # in UTF-16 code units
    name_units     = fields.StringField(ScaledDependency(2, '.name_length'))
    terminator     = fields.StringField(2, default=b'\x00\x00', is_magic=True)

    @property
    def section_name(self):
        # invalid code units are replaced, never fatal
        return bytes(self.name_units.value).decode('utf-16-le', errors='replace')


def decode_file(data):
    return PFSFile.decode(data)


def decode_chunk(section):
    '''Decode the data of the section as a chunk, raising ChunkDecodeFailure if not possible.'''
    if section.data.value is None:
        raise ChunkDecodeFailure(chain=['data'], message='section without data can\'t be a chunk')

    try:
        chunk, _ = PFSChunk.decode(section.data.value)
    except UnpackException as e:
        raise ChunkDecodeFailure(chain=e.chain + ['data'], message=str(e)) from e

    return chunk


def decode_info(data):
    '''Decode as many information records as possible from the data.

    It returns the list of the entries and what was left unparsed; if not even
    one record can be decoded InfoSectionDecodeFailure is raised.'''
    stream = Stream(data)
    entries = []

    while stream.remaining:
        offset = stream.tell()
        try:
            entries.append(PFSInfoEntry(stream))
        except UnpackException as e:
            logger.debug('information record at offset 0x%x is not valid: %s', offset, e)
            stream.seek(offset)
            break

    if not entries and stream.remaining:
        raise InfoSectionDecodeFailure(chain=[], message='no information record found')

    return entries, stream.read_all()
