"""
Core module for the abstraction of a file format

"""
from typing import Tuple, List

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import UnpackException


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: its main attributes
    are offset and size that identify a Chunk.

    A Chunk contains sub-fields, declared as class attributes in the order
    they appear in the binary data; a Chunk instance can itself be used as
    a sub-field of another Chunk.

    Passing some data (bytes, memoryview, a path or a Stream) to the
    constructor unpacks it right away.
    """

    def __init__(self, data=None, **kwargs):
        super().__init__(**kwargs)

        if data is not None:
            stream = data if isinstance(data, Stream) else Stream(data)
            self.logger.debug('unpacking \'%s\' from %r', self.__class__.__name__, stream)
            self.unpack(stream)

    @classmethod
    def decode(cls, data) -> Tuple["Chunk", memoryview]:
        '''Unpack an instance from the start of the data and return it
        together with what is left unconsumed.'''
        stream = data if isinstance(data, Stream) else Stream(data)
        chunk = cls()
        chunk.unpack(stream)

        return chunk, stream.read_all()

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def init(self):
        for _, field in self.get_fields():
            field.init()

    @property
    def value(self):
        return self

    def _get_size(self):
        '''the size is derived from the subchunks'''
        size = 0
        for _, field in self.get_fields():
            size += field.size

        return size

    def unpack(self, stream):
        '''Take the binary data from the stream and fill the fields in the order
        they are declared.

        When a field fails, its name is appended to the chain of the exception
        so that who catches it knows where the parsing stopped.
        '''
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            offset = stream.tell()
            self.logger.debug('unpacking %s.%s at offset 0x%x', self.__class__.__name__, field_name, offset)

            try:
                field.unpack(stream)
            except UnpackException as e:
                e.chain.append(field_name)
                raise

            field.offset = offset
