'''
Recursive extraction of a PFS container.

Every section with data is handed to the writer (data, signatures and
metadata) and then classified, the first classifier that matches wins:

 1. compressed: the data is a zlib-compressed section, its decompressed
    content is another container to extract
 2. subsection: the data is a container whose sections are chunks, the
    chunks sorted by order number make up the payload
 3. raw: nothing more to do

The nested containers are not extracted recursively but through a stack
of pending jobs, and there is a limit to how deep they can be nested.
'''
import logging
import zlib
from enum import Enum, auto
from typing import Callable, List, NamedTuple, Optional, Tuple

from . import PFSFile, PFSCompressedSection, decode_chunk
from .info import resolve_names
from .utils import render_version, section_label, artifact_name, nested_prefix
from ...exceptions import (
    UnpackException,
    DecompressionFailure,
    ChunkDecodeFailure,
    NestingDepthExceeded,
)


logger = logging.getLogger(__name__)

MAX_DEPTH = 16


class SectionKind(Enum):
    COMPRESSED        = auto()
    SUBSECTION_CHUNKS = auto()
    RAW_LEAF          = auto()


class Classification(NamedTuple):
    kind: SectionKind
    payload: Optional[bytes] = None


class Job(NamedTuple):
    data: bytes
    prefix: str
    depth: int


def decompress(data) -> bytes:
    decompressor = zlib.decompressobj()

    try:
        decompressed = decompressor.decompress(data)
    except zlib.error as e:
        raise DecompressionFailure(chain=[], message=str(e)) from e

    if not decompressor.eof:
        raise DecompressionFailure(chain=[], message='the zlib stream is truncated')

    if decompressor.unused_data:
        logger.info('Unparsed size: %X', len(decompressor.unused_data))

    return decompressed


def classify_compressed(data) -> Optional[Classification]:
    try:
        compressed, rest = PFSCompressedSection.decode(data)
    except UnpackException:
        return None

    if len(rest) > 0:
        logger.info('Unparsed size: %X', len(rest))

    try:
        payload = decompress(compressed.payload.value)
    except DecompressionFailure as e:
        logger.warning('Zlib decompression failed, the section is kept as it is: %s', e)
        return Classification(SectionKind.RAW_LEAF)

    return Classification(SectionKind.COMPRESSED, payload)


def classify_subsection(data) -> Optional[Classification]:
    try:
        subsection, rest = PFSFile.decode(data)
    except UnpackException:
        return None

    if len(rest) > 0:
        logger.info('Unparsed size: %X', len(rest))

    chunks = []
    for section in subsection.sections:
        try:
            chunks.append(decode_chunk(section))
        except ChunkDecodeFailure as e:
            # all or nothing
            logger.warning('PFS subsection with an invalid chunk, discarding all of them: %s', e)
            return None

    if not chunks:
        return None

    chunks = sorted(chunks, key=lambda _: _.order_number.value)

    return Classification(SectionKind.SUBSECTION_CHUNKS, b''.join([_.payload.value for _ in chunks]))


def classify_raw(data) -> Optional[Classification]:
    return Classification(SectionKind.RAW_LEAF)


CLASSIFIERS = [
    classify_compressed,
    classify_subsection,
    classify_raw,
]


def classify(data) -> Classification:
    for classifier in CLASSIFIERS:
        classification = classifier(data)
        if classification is not None:
            return classification


class Extractor(object):
    '''Walk a PFS container handing each artifact to the writer, a callable
    taking the name of the artifact and its content.'''

    def __init__(self, writer: Callable[[str, bytes], None], max_depth: int = MAX_DEPTH):
        self.writer = writer
        self.max_depth = max_depth
        self.artifacts: List[str] = []

    def emit(self, name, data):
        logger.debug('writing \'%s\' (0x%x bytes)', name, len(data))
        self.writer(name, data)
        self.artifacts.append(name)

    def push(self, jobs: List[Job], data, prefix, depth):
        if depth > self.max_depth:
            raise NestingDepthExceeded(
                chain=[],
                message=f'containers nested deeper than {self.max_depth} levels at \'{prefix}\'')

        jobs.append(Job(data, prefix, depth))

    def extract(self, data, prefix='') -> List[str]:
        '''Extract the container in data and all the containers nested in it.

        If data itself is not a container the exception is propagated, a nested
        container that doesn't decode is only logged.'''
        jobs: List[Job] = []
        self.push(jobs, data, prefix, 0)

        while jobs:
            job = jobs.pop()

            try:
                pfs, rest = PFSFile.decode(job.data)
            except UnpackException as e:
                if job.depth == 0:
                    raise
                logger.error('PFS file parse error, \'%s\' can\'t be parsed: %s', job.prefix, e)
                continue

            if len(rest) > 0:
                logger.info('Unparsed size: %X', len(rest))

            nested = self.extract_sections(pfs, job.prefix)

            # reversed so that the first section found is the first extracted
            for payload, payload_prefix in reversed(nested):
                self.push(jobs, payload, payload_prefix, job.depth + 1)

        return self.artifacts

    def extract_sections(self, pfs: PFSFile, prefix: str) -> List[Tuple[bytes, str]]:
        names = resolve_names(pfs.sections.value)
        nested = []

        for idx, section in enumerate(pfs.sections, start=1):
            version = render_version(section.version_type.value, section.version.value)

            logger.info('GUID: %s', section.guid)
            logger.info('Header version: %X', section.header_version.value)
            logger.info('Data size: %X', section.data_size.value)
            logger.info('Data signature size: %X', section.data_sig_size.value)
            logger.info('Metadata size: %X', section.meta_size.value)
            logger.info('Metadata signature size: %X', section.meta_sig_size.value)
            logger.info('Version: %s', version)

            if section.data_size.value == 0:
                continue

            label = section_label(idx, names.get(idx - 1, ''))

            self.emit(artifact_name(prefix, label, version, 'data'), section.data.value)

            for suffix, blob in (
                ('data.sig', section.data_sig),
                ('meta', section.meta),
                ('meta.sig', section.meta_sig),
            ):
                if blob.value is not None:
                    self.emit(artifact_name(prefix, label, version, suffix), blob.value)

            classification = classify(section.data.value)
            logger.info('PFS section type: %s', classification.kind.name.lower())

            if classification.kind == SectionKind.COMPRESSED:
                self.emit(artifact_name(prefix, label, version, 'decompressed'), classification.payload)
                nested.append((classification.payload, nested_prefix(prefix, label, version)))
            elif classification.kind == SectionKind.SUBSECTION_CHUNKS:
                self.emit(artifact_name(prefix, label, version, 'data.payload'), classification.payload)

        return nested


def extract(data, writer, prefix='', max_depth=MAX_DEPTH) -> List[str]:
    return Extractor(writer, max_depth=max_depth).extract(data, prefix=prefix)
