import logging
import os

from .exceptions import InsufficientLength


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around a buffer (or a path) to uniform
    the way the fields read from it.

    Reading never copies: what is returned is a memoryview over the
    underlying buffer, so the buffer lives as long as the decoded
    fields referencing it.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a memoryview'''
        if isinstance(obj, os.PathLike):
            obj = os.fspath(obj)

        self._type = type(obj)
        self.obj = obj
        self.history = []
        self._offset = 0

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise ValueError('\'%s\' can\'t be used as a stream' % self.obj.__class__.__name__)

        init_method()

    def __repr__(self):
        return f'<{self.__class__.__name__}(type={self._type.__name__}, offset=0x{self._offset:x}, size=0x{len(self):x})>'

    def __len__(self):
        return len(self.buffer)

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        with open(self.obj, 'rb') as f:
            self.buffer = memoryview(f.read())

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.buffer = memoryview(self.obj)

    init_bytearray = init_bytes

    def init_memoryview(self):
        self.buffer = self.obj.cast('B') if self.obj.format != 'B' else self.obj

    @property
    def remaining(self):
        return len(self.buffer) - self._offset

    def tell(self):
        return self._offset

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        if not 0 <= offset <= len(self.buffer):
            raise ValueError(f'offset 0x{offset:x} is outside the stream')

        self._offset = offset

        return self

    def read(self, size):
        if size < 0:
            raise ValueError('size must be positive')

        if size > self.remaining:
            raise InsufficientLength(
                chain=[],
                message=f'wanted 0x{size:x} bytes at offset 0x{self._offset:x} but only 0x{self.remaining:x} remain')

        data = self.buffer[self._offset:self._offset + size]
        self._offset += size

        return data

    def read_all(self):
        '''Returns everything from the actual offset to the end of the stream.'''
        return self.read(self.remaining)

    def save(self):
        self.history.append(self._offset)

    def restore(self):
        self._offset = self.history.pop()
