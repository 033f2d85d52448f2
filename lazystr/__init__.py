from .dispatch import UNSUPPORTED, invoke
from .errors import ClosureArityError, StringWriterError, UnsupportedEncodingError
from .template import EMPTY, InterpolatedString, Interpolation, parse_template, t

__all__ = [
    'EMPTY',
    'UNSUPPORTED',
    'ClosureArityError',
    'InterpolatedString',
    'Interpolation',
    'StringWriterError',
    'UnsupportedEncodingError',
    'invoke',
    'parse_template',
    't',
]
