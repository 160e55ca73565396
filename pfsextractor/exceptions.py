class PFSException(Exception):
    '''Base class to extend in order to throw exception in pfsextractor.

    It takes as argument the chain of the fields that caused the exception,
    innermost first: each chunk the exception goes through appends its
    own field name.
    '''

    def __init__(self, chain=None, message=None):
        self.chain = chain if chain is not None else []
        self.message = message
        super().__init__()

    @property
    def path(self):
        return '.'.join(self.chain[::-1])

    def __str__(self):
        msg = self.message or self.__class__.__name__
        if self.chain:
            msg += f' (at \'{self.path}\')'

        return msg


class UnpackException(PFSException):
    pass


class MalformedMagic(UnpackException):
    pass


class InsufficientLength(UnpackException):
    '''The buffer is shorter than a declared size.'''
    pass


class DecompressionFailure(PFSException):
    pass


class ChunkDecodeFailure(PFSException):
    pass


class InfoSectionDecodeFailure(PFSException):
    pass


class UnrecoverableException(PFSException):
    '''This is useful when is not possible to go on with the extraction.'''
    pass


class NestingDepthExceeded(UnrecoverableException):
    pass
