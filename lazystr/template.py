import ast
import codecs
import inspect
import io
import re
import sys
from ast import Expression, FormattedValue, JoinedStr
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Protocol, Tuple, TypeVar, Union

from . import config
from .dispatch import UNSUPPORTED
from .errors import ClosureArityError, StringWriterError, UnsupportedEncodingError


class Sink(Protocol):
    def write(self, s: str, /) -> Any: ...


class Builder(Protocol):
    def literal(self, text: str) -> Any: ...

    def value(self, value: Any) -> Any: ...


S = TypeVar('S', bound=Sink)


class Interpolation:
    def __init__(self, value: object) -> None:
        self.value = value

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f'Interpolation({self.value!r})'


TemplatePart = Union[str, Interpolation]


def is_deferred(value: Any) -> bool:
    return callable(value) and not isinstance(value, type)


def max_parameters(fn: Callable[..., Any]) -> int:
    """Number of positional arguments ``fn`` accepts.

    ``*args`` counts as a single parameter, so variadic callables such as
    ``print`` receive the sink. Callables without an inspectable signature are
    treated as taking none. A required keyword-only parameter can be satisfied
    by neither call form and raises ``ClosureArityError``.
    """
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return 0

    count = 0
    keywords = []
    for p in sig.parameters.values():
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL):
            count += 1
        elif p.kind is p.KEYWORD_ONLY and p.default is p.empty:
            keywords.append(p.name)

    if keywords:
        raise ClosureArityError(fn, count + len(keywords), keywords)
    return count


def is_writable(value: Any) -> bool:
    return not isinstance(value, type) and callable(getattr(type(value), 'write_to', None))


def write_value(out: Sink, value: Any) -> None:
    if value is None:
        out.write(config.NULL_TEXT)
    elif isinstance(value, str):
        out.write(value)
    elif is_writable(value):
        value.write_to(out)
    else:
        out.write(str(value))


def write_slot(out: Sink, value: Any) -> None:
    if is_deferred(value):
        count = max_parameters(value)
        if count == 0:
            write_slot(out, value())
        elif count == 1:
            value(out)
        else:
            raise ClosureArityError(value, count)
    else:
        write_value(out, value)


def convert(value: Any, conversion: Optional[str], format_spec: str = '') -> Any:
    if conversion == 'r':
        value = repr(value)
    elif conversion == 's':
        value = str(value)
    elif conversion == 'a':
        value = ascii(value)
    return format(value, format_spec)


class InterpolatedString:
    """A string with embedded values rendered lazily.

    The template is a sequence of literal ``fragments`` and a sequence of
    ``values``, ``len(fragments)`` being equal to ``len(values)`` or one
    more. Rendering interleaves ``fragments[0], values[0], fragments[1], ...``.
    Nothing is rendered until asked: ``str()``, ``write_to()`` and every text
    based operation render again on each call, so callables embedded as values
    are re-invoked every time.

    A callable value taking no parameters is called and its result rendered in
    place. A callable taking one parameter receives the output sink and writes
    into it directly. A callable taking more parameters fails with
    ``ClosureArityError`` when rendered.

    Note that equality, hashing and ordering are defined by the rendered text
    only. Two instances with completely different fragments and values are
    equal if they render to the same text, and an instance holding a callable
    whose output changes between calls may even be unequal to itself.
    """

    __slots__ = ('_fragments', '_values')

    _fragments: Tuple[str, ...]
    _values: Tuple[Any, ...]

    NATIVE = frozenset(
        ['write_to', 'concat', 'build', 'parts', 'encode', 'pattern', 'value_at', 'as_record']
    )

    def __init__(self, fragments: Iterable[str], values: Iterable[Any] = ()) -> None:
        fragments = tuple(fragments)
        values = tuple(values)
        if len(fragments) != len(values) and len(fragments) != len(values) + 1:
            raise ValueError(
                f'Expected {len(values)} or {len(values) + 1} fragments for {len(values)} values, got {len(fragments)}'
            )
        for it in fragments:
            if not isinstance(it, str):
                raise TypeError(f'Fragments must be str, got {type(it).__name__}')

        object.__setattr__(self, '_fragments', fragments)
        object.__setattr__(self, '_values', values)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f'{self.__class__.__name__} is immutable')

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f'{self.__class__.__name__} is immutable')

    @property
    def fragments(self) -> Tuple[str, ...]:
        return self._fragments

    @property
    def values(self) -> Tuple[Any, ...]:
        return self._values

    @property
    def value_count(self) -> int:
        return len(self._values)

    def value_at(self, idx: int) -> Any:
        return self._values[idx]

    @classmethod
    def from_parts(cls, *parts: TemplatePart) -> 'InterpolatedString':
        fragments: List[str] = []
        values: List[Any] = []
        for it in parts:
            if isinstance(it, Interpolation):
                if len(fragments) == len(values):
                    fragments.append('')
                values.append(it.value)
            elif isinstance(it, str):
                if len(fragments) > len(values):
                    fragments[-1] += it
                else:
                    fragments.append(it)
            else:
                raise TypeError(f'Template parts must be str or Interpolation, got {type(it).__name__}')

        if not fragments:
            fragments.append('')
        return cls(fragments, values)

    @classmethod
    def from_template(cls, template: Any) -> 'InterpolatedString':
        """Build from a ``string.templatelib.Template`` (or anything shaped like it)."""
        values = []
        for it in template.interpolations:
            if it.conversion or it.format_spec:
                values.append(convert(it.value, it.conversion, it.format_spec))
            else:
                values.append(it.value)
        return cls(template.strings, values)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'InterpolatedString':
        return cls(record['fragments'], record['values'])

    def as_record(self) -> dict[str, list[Any]]:
        return {'fragments': list(self._fragments), 'values': list(self._values)}

    def __reduce__(self) -> Tuple[Any, ...]:
        return self.__class__, (self._fragments, self._values)

    def parts(self) -> Iterator[TemplatePart]:
        nvalues = len(self._values)
        for i, fragment in enumerate(self._fragments):
            yield fragment
            if i < nvalues:
                yield Interpolation(self._values[i])

    def write_to(self, out: S) -> S:
        values = self._values
        nvalues = len(values)
        for i, fragment in enumerate(self._fragments):
            out.write(fragment)
            if i < nvalues:
                write_slot(out, values[i])
        return out

    def build(self, builder: Builder) -> None:
        values = self._values
        nvalues = len(values)
        for i, fragment in enumerate(self._fragments):
            builder.literal(fragment)
            if i < nvalues:
                builder.value(values[i])

    def concat(self, other: Union['InterpolatedString', str]) -> 'InterpolatedString':
        if isinstance(other, str):
            other = InterpolatedString((other,))

        fragments = list(self._fragments)
        other_fragments = list(other._fragments)
        if len(fragments) > len(self._values) and other_fragments:
            # merge onto the trailing literal to avoid an empty bridging value
            fragments[-1] += other_fragments.pop(0)

        fragments.extend(other_fragments)
        return InterpolatedString(fragments, self._values + other._values)

    def dispatch(self, name: str, *args: Any, **kwargs: Any) -> Any:
        if name in self.NATIVE:
            return getattr(self, name)(*args, **kwargs)
        return UNSUPPORTED

    def __str__(self) -> str:
        buffer = io.StringIO()
        try:
            self.write_to(buffer)
        except OSError as e:
            raise StringWriterError(str(e)) from e
        return buffer.getvalue()

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self._fragments!r}, {self._values!r})'

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)

    def __add__(self, other: Any) -> 'InterpolatedString':
        if isinstance(other, (InterpolatedString, str)):
            return self.concat(other)
        return NotImplemented

    def __radd__(self, other: Any) -> 'InterpolatedString':
        if isinstance(other, str):
            return InterpolatedString((other,)).concat(self)
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        if isinstance(other, InterpolatedString):
            return str(self) == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))

    def __lt__(self, other: Any) -> bool:
        text = _comparable_text(other)
        if text is None:
            return NotImplemented
        return str(self) < text

    def __le__(self, other: Any) -> bool:
        text = _comparable_text(other)
        if text is None:
            return NotImplemented
        return str(self) <= text

    def __gt__(self, other: Any) -> bool:
        text = _comparable_text(other)
        if text is None:
            return NotImplemented
        return str(self) > text

    def __ge__(self, other: Any) -> bool:
        text = _comparable_text(other)
        if text is None:
            return NotImplemented
        return str(self) >= text

    def __len__(self) -> int:
        return len(str(self))

    def __getitem__(self, key: Union[int, slice]) -> str:
        return str(self)[key]

    def __iter__(self) -> Iterator[str]:
        return iter(str(self))

    def __contains__(self, item: Any) -> bool:
        if isinstance(item, InterpolatedString):
            item = str(item)
        return item in str(self)

    def pattern(self, flags: int = 0) -> 're.Pattern[str]':
        return re.compile(str(self), flags)

    def __invert__(self) -> 're.Pattern[str]':
        return self.pattern()

    def encode(self, encoding: Optional[str] = None, errors: str = 'strict') -> bytes:
        encoding = encoding or config.DEFAULT_ENCODING
        codecs.lookup_error(errors)
        text = str(self)
        try:
            # bytes-to-bytes codecs like hex or base64 fail here too
            return text.encode(encoding, errors)
        except LookupError as e:
            raise UnsupportedEncodingError(encoding) from e

    def __bytes__(self) -> bytes:
        return self.encode()


def _comparable_text(other: Any) -> Optional[str]:
    if isinstance(other, InterpolatedString):
        return str(other)
    if isinstance(other, str):
        return other
    return None


EMPTY = InterpolatedString(('',))


def parse_template(
    string: str, namespace: Optional[Mapping[str, Any]] = None, *, level: int = 1
) -> InterpolatedString:
    root = ast.parse('f' + repr(string), mode='eval')
    if namespace is None:
        frame = sys._getframe(level)
        f_globals, f_locals = frame.f_globals, frame.f_locals
    else:
        f_globals, f_locals = {}, namespace

    parts: List[TemplatePart] = []
    for it in root.body.values:  # type: ignore[attr-defined]
        if type(it) is FormattedValue:
            if it.conversion != -1 or it.format_spec:
                # conversions and format specs are applied now, the slot gets the text
                expr: ast.expr = ast.fix_missing_locations(JoinedStr(values=[it]))
            else:
                expr = it.value
            code = compile(Expression(expr), '<string>', 'eval')
            parts.append(Interpolation(eval(code, f_globals, f_locals)))
        else:
            parts.append(it.value)
    return InterpolatedString.from_parts(*parts)


t = parse_template
