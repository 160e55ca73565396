"""
A Field is "fundamental" datatype from the format point of view, something directly
unpackable from a stream.

Everything is decoded as little endian.
"""
import logging
import struct

from .meta import FieldBase
from .properties import Dependency
from .exceptions import UnpackException, MalformedMagic


logger = logging.getLogger(__name__)


class Field(FieldBase):
    """Base class to subclass from"""
    logger = logger

    def __init__(self, name=None, father=None, default=None, offset=None, is_magic=False):
        super().__init__()
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.is_magic = is_magic

        self.init()

    def init(self):
        self._value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    @property
    def value(self):
        return self._value

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def check_magic(self, value):
        if self.is_magic and value != self.default:
            self.logger.debug('the magic for field \'%s\' doesn\'t correspond', self.name)
            raise MalformedMagic(
                chain=[],
                message=f'expected magic {bytes(self.default)!r}, found {bytes(value)!r}')

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module unpacking
    integers from bytes.

    A format with more than one element (like '4H') gives a tuple as value.
    """

    def __init__(self, format, default=0, **kw):
        self.format = format
        super().__init__(default=default, **kw)

    def __repr__(self):
        if isinstance(self.value, int):
            return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

        return f'<{self.__class__.__name__}({self.value!r})>'

    def get_format(self):
        return '<%s' % self.format

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def unpack(self, stream):
        raw = stream.read(self.size)

        try:
            values = struct.unpack(self.get_format(), raw)
        except struct.error as e:
            raise UnpackException(chain=[], message=str(e))

        value = values[0] if len(values) == 1 else values

        self.check_magic(value)

        self._value = value


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The length can be a Dependency, in that case is resolved at unpacking time.
    If "optional" is set a zero length means the string is absent and its value is None."""

    def __init__(self, n=None, optional=False, **kw):
        if n is None and 'default' not in kw:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self._length = n if n is not None else len(kw['default'])
        self.optional = optional

        super().__init__(**kw)

    def __repr__(self):
        value = self.value if self.value is None else bytes(self.value)
        return '<%s(%r)>' % (self.__class__.__name__, value)

    def __len__(self):
        return self.size

    @property
    def length(self):
        if isinstance(self._length, Dependency):
            return self._length.resolve(self)

        return self._length

    def value_from_default(self):
        if self.default is not None:
            return self.default

        if self.optional:
            return None

        return b'' if isinstance(self._length, Dependency) else b'\x00' * self._length

    def _get_size(self):
        return 0 if self.value is None else len(self.value)

    def unpack(self, stream):
        length = self.length

        if self.optional and length == 0:
            self._value = None
        else:
            value = stream.read(length)
            self.check_magic(value)
            self._value = value


class ArrayField(Field):
    '''Unpack an array of Chunks.

    You can indicate an explicit number of elements via the parameter named "n"
    (an integer or a Dependency) or you can indicate with a callable named "until"
    which receives the array and the stream and returns True when the next bytes
    are the terminator of the list.

    The value is a plain list of the unpacked elements.
    '''

    def __init__(self, field_cls, n=0, until=None, **kw):
        if n and not isinstance(n, (int, Dependency)):
            raise ValueError('n is \'%s\' must be of the right type' % n.__class__.__name__)

        self.field_cls = field_cls
        self._n = n
        self._until = until

        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    @property
    def n(self):
        if isinstance(self._n, Dependency):
            return self._n.resolve(self)

        return self._n

    def value_from_default(self):
        return list(self.default) if self.default else []

    def _get_size(self):
        size = 0
        for element in self.value:
            size += element.size

        return size

    def instance_element(self):
        return self.field_cls(father=self)  # pass the father so that we don't lose the hierarchy

    def _unpack_element(self, stream):
        idx = len(self._value)
        element = self.instance_element()
        element.name = f'[{idx}]'

        try:
            element.unpack(stream)
        except UnpackException as e:
            e.chain.append(element.name)
            raise

        self._value.append(element)

    def unpack(self, stream):
        self._value = []

        if self._until is not None:
            while not self._until(self, stream):
                self._unpack_element(stream)
        else:
            for _ in range(self.n):
                self._unpack_element(stream)

        self.logger.debug('unpacked %d elements for \'%s\'', len(self._value), self.name)


class PaddingField(Field):
    '''Takes as much stream as possible'''

    def value_from_default(self):
        return b''

    def _get_size(self):
        return len(self.value)

    def unpack(self, stream):
        self._value = stream.read_all()
