class LedgerException(Exception):
    pass


class InputParseError(LedgerException):
    pass


class LedgerConnectionError(LedgerException):
    pass


class SchemaError(LedgerException):
    pass


class CodecError(LedgerException):
    pass


class WriteError(LedgerException):
    pass


class ReadError(LedgerException):
    pass


class NameResolutionError(LedgerException):
    pass
