import logging


logger = logging.getLogger(__name__)


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class Simple(Chunk):
            length = fields.StructField('I')
            data = fields.StringField(Dependency('.length'))

    and have the length of the string contained in the field named 'data'
    taken from the field named 'length' at unpacking time.

    The expression is relative to the father of the field, the leading '.'
    marks it as a sibling like in a relative import.
    '''
    def __init__(self, expression):
        if not expression.startswith('.'):
            raise ValueError(f'\'{expression}\' must start with \'.\'')

        self.expression = expression

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        logger.debug('trying to resolve \'%s\' for \'%s\'', self.expression, instance.name)

        field = instance.father

        if field is None:
            raise AttributeError(f'\'{self.expression}\' can\'t be resolved for a field without father')

        # '.miao.bau'.split(".") -> ['', 'miao', 'bau']
        for component_name in self.expression.split('.')[1:]:
            field = getattr(field, component_name)

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        value = self.resolve_field(instance).value

        logger.debug(' resolved with value %r', value)

        return value


class ScaledDependency(Dependency):
    '''Like Dependency but the value is multiplied by a factor, useful
    when a count of elements has to become a size in bytes.'''

    def __init__(self, factor, expression):
        super().__init__(expression)
        self._factor = factor

    def resolve(self, instance):
        return super().resolve(instance) * self._factor
