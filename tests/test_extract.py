import logging
import zlib

import pytest

from pfsextractor.exceptions import DecompressionFailure, MalformedMagic, NestingDepthExceeded
from pfsextractor.firmware.pfs.extract import (
    SectionKind,
    classify,
    decompress,
    extract,
)

from builders import (
    build_chunk,
    build_compressed,
    build_file,
    build_info_section,
    build_section,
)


def wrap(inner, name):
    '''A container with a single compressed section holding inner.'''
    return build_file([
        build_section(data=build_compressed(inner)),
        build_info_section([name]),
    ])


def test_decompress():
    assert decompress(zlib.compress(b'abc' * 100)) == b'abc' * 100

    with pytest.raises(DecompressionFailure):
        decompress(b'garbage')

    with pytest.raises(DecompressionFailure):
        decompress(zlib.compress(bytes(range(256)) * 16)[:-8])


def test_classify():
    assert classify(b'opaque').kind == SectionKind.RAW_LEAF

    compressed = classify(build_compressed(b'content'))
    assert compressed.kind == SectionKind.COMPRESSED
    assert compressed.payload == b'content'

    chunks = classify(build_file([build_section(data=build_chunk(0, b'Z'))]))
    assert chunks.kind == SectionKind.SUBSECTION_CHUNKS
    assert chunks.payload == b'Z'


def test_raw(collector):
    data = build_file([
        build_section(data=b'raw'),
        build_info_section(['Foo Bar']),
    ])

    artifacts = extract(data, collector)

    assert artifacts == ['1_Foo_Bar_1.2.data', '2_Section_Info_1.2.data']
    assert list(collector) == artifacts
    assert collector['1_Foo_Bar_1.2.data'] == b'raw'


def test_signatures_and_metadata(collector):
    data = build_file([
        build_section(data=b'D', data_sig=b'S', meta=b'M', meta_sig=b'T'),
        build_info_section(['X']),
    ])

    extract(data, collector)

    assert list(collector) == [
        '1_X_1.2.data',
        '1_X_1.2.data.sig',
        '1_X_1.2.meta',
        '1_X_1.2.meta.sig',
        '2_Section_Info_1.2.data',
    ]
    assert [collector[_] for _ in list(collector)[:4]] == [b'D', b'S', b'M', b'T']


def test_section_without_data_is_skipped(collector):
    data = build_file([
        build_section(meta=b'M'),
        build_section(data=b'a'),
        build_info_section(['A', 'B']),
    ])

    extract(data, collector)

    assert list(collector) == ['2_B_1.2.data', '3_Section_Info_1.2.data']


def test_generic_names(collector):
    data = build_file([
        build_section(data=b'a'),
        build_section(data=b'\x01\x02\x03'),
    ])

    extract(data, collector)

    assert list(collector) == ['section_1_1.2.data', 'section_2_1.2.data']


def test_version_in_name(collector):
    data = build_file([
        build_section(data=b'a', version_type=b'AN  ', version=(0x1F, 7, 0, 0)),
        build_section(data=b'b', version_type=b'Q\x00\x00\x00'),
    ])

    extract(data, collector)

    assert list(collector) == ['section_1_1F.7.data', 'section_2_0.data']


def test_compressed(collector):
    inner = build_file([
        build_section(data=b'inner', version_type=b'A\x00\x00\x00', version=(0x1F, 0, 0, 0)),
        build_info_section(['Inner']),
    ])
    data = wrap(inner, 'BIOS')

    extract(data, collector)

    assert list(collector) == [
        '1_BIOS_1.2.data',
        '1_BIOS_1.2.decompressed',
        '2_Section_Info_1.2.data',
        '1_BIOS_1.2._1_Inner_1F.data',
        '1_BIOS_1.2._2_Section_Info_1.2.data',
    ]
    assert collector['1_BIOS_1.2.decompressed'] == inner
    assert collector['1_BIOS_1.2._1_Inner_1F.data'] == b'inner'


def test_compressed_order(collector):
    '''The contents of a nested container come before the ones of the
    following nested containers.'''
    first = build_file([build_section(data=b'1'), build_info_section(['One'])])
    second = build_file([build_section(data=b'2'), build_info_section(['Two'])])
    data = build_file([
        build_section(data=build_compressed(first)),
        build_section(data=build_compressed(second)),
        build_info_section(['A', 'B']),
    ])

    extract(data, collector)

    assert list(collector) == [
        '1_A_1.2.data',
        '1_A_1.2.decompressed',
        '2_B_1.2.data',
        '2_B_1.2.decompressed',
        '3_Section_Info_1.2.data',
        '1_A_1.2._1_One_1.2.data',
        '1_A_1.2._2_Section_Info_1.2.data',
        '2_B_1.2._1_Two_1.2.data',
        '2_B_1.2._2_Section_Info_1.2.data',
    ]


def test_chunks(collector):
    subsection = build_file([
        build_section(data=build_chunk(3, b'C')),
        build_section(data=build_chunk(1, b'A')),
        build_section(data=build_chunk(2, b'B')),
    ])
    data = build_file([
        build_section(data=subsection),
        build_info_section(['Firmware']),
    ])

    extract(data, collector)

    assert list(collector) == [
        '1_Firmware_1.2.data',
        '1_Firmware_1.2.data.payload',
        '2_Section_Info_1.2.data',
    ]
    assert collector['1_Firmware_1.2.data.payload'] == b'ABC'


def test_chunks_same_order_number():
    subsection = build_file([
        build_section(data=build_chunk(2, b'P')),
        build_section(data=build_chunk(1, b'X')),
        build_section(data=build_chunk(1, b'Y')),
    ])

    assert classify(subsection).payload == b'XYP'


def test_invalid_chunk(collector, caplog):
    subsection = build_file([
        build_section(data=build_chunk(1, b'A')),
        build_section(data=b'too short'),
    ])
    data = build_file([
        build_section(data=subsection),
        build_info_section(['Firmware']),
    ])

    with caplog.at_level(logging.WARNING):
        extract(data, collector)

    assert list(collector) == ['1_Firmware_1.2.data', '2_Section_Info_1.2.data']
    assert 'discarding all of them' in caplog.text


def test_invalid_zlib(collector, caplog):
    data = build_file([
        build_section(data=build_compressed(b'', payload=b'not a zlib stream')),
        build_info_section(['BIOS']),
    ])

    with caplog.at_level(logging.WARNING):
        extract(data, collector)

    assert list(collector) == ['1_BIOS_1.2.data', '2_Section_Info_1.2.data']
    assert 'decompression failed' in caplog.text


def test_truncated_zlib(collector):
    data = build_file([
        build_section(data=build_compressed(b'', payload=zlib.compress(bytes(range(256)) * 16)[:-8])),
        build_info_section(['BIOS']),
    ])

    extract(data, collector)

    assert list(collector) == ['1_BIOS_1.2.data', '2_Section_Info_1.2.data']


def test_nested_not_a_container(collector, caplog):
    data = wrap(b'this is not a PFS file', 'BIOS')

    with caplog.at_level(logging.ERROR):
        extract(data, collector)

    assert list(collector) == [
        '1_BIOS_1.2.data',
        '1_BIOS_1.2.decompressed',
        '2_Section_Info_1.2.data',
    ]
    assert '\'1_BIOS_1.2._\' can\'t be parsed' in caplog.text


def test_not_a_container(collector):
    with pytest.raises(MalformedMagic):
        extract(b'NOT.PFS.' + b'\x00' * 32, collector)

    assert len(collector) == 0


def test_max_depth(collector):
    leaf = build_file([build_section(data=b'leaf'), build_info_section(['L2'])])
    data = wrap(wrap(leaf, 'L1'), 'L0')

    with pytest.raises(NestingDepthExceeded):
        extract(data, {}.__setitem__, max_depth=1)

    extract(data, collector, max_depth=2)

    assert collector['1_L0_1.2._1_L1_1.2._1_L2_1.2.data'] == b'leaf'


def test_prefix(collector):
    data = build_file([
        build_section(data=b'raw'),
        build_info_section(['Foo']),
    ])

    extract(data, collector, prefix='fw_')

    assert list(collector) == ['fw_1_Foo_1.2.data', 'fw_2_Section_Info_1.2.data']
