"""
# pfsextractor

Decode and unpack PFS, the nested binary container used to ship firmware
update payloads.

The formats are described declaratively: a Chunk is a sequence of fields
declared as class attributes, each field knows how to unpack itself from a
stream and the size of a field can depend on the value of another one

    class PFSCompressedSection(Chunk):
        payload_size = fields.StructField('I')
        magic        = fields.StringField(11, default=MAGIC, is_magic=True)
        padding      = fields.StringField(1)
        payload      = fields.StringField(Dependency('.payload_size'))
        trailer      = fields.StringField(16)

Unpacking never copies the data: the strings are memoryview over the
original buffer.

On top of this the extraction engine walks a container, names its sections
using the information section, and goes down into compressed sections and
chunked sub-containers, handing every artifact found to a writer.

Only decoding is supported: there is no way to build a PFS file.
"""
