import importlib.abc
import logging
import sys
from ast import (
    AST,
    Attribute,
    Call,
    Constant,
    FormattedValue,
    ImportFrom,
    JoinedStr,
    Load,
    Module,
    Name,
    NodeTransformer,
    alias,
    copy_location,
    fix_missing_locations,
    parse,
)
from importlib.machinery import PathFinder
from typing import List

from .template import InterpolatedString

log = logging.getLogger(__name__)

PREFIX = '!! '
IMPORTED_CLASS_NAME = '__lazystr_interpolated_string'
IMPORTED_INTERPOLATE_NAME = '__lazystr_interpolation'


class FStringTransformer(NodeTransformer):
    has_transform = False

    def visit_JoinedStr(self, node: JoinedStr) -> AST:
        first = node.values[0] if node.values else None
        if type(first) is Constant and isinstance(first.value, str) and first.value.startswith(PREFIX):
            self.has_transform = True
            first.value = first.value[len(PREFIX) :]
            args: List[AST] = []
            for value in node.values:
                if type(value) is FormattedValue:
                    if value.conversion != -1 or value.format_spec:
                        # formatted right away, the slot holds the resulting text
                        inner: AST = copy_location(JoinedStr(values=[value]), value)
                    else:
                        inner = value.value
                    args.append(
                        copy_location(
                            Call(func=Name(id=IMPORTED_INTERPOLATE_NAME, ctx=Load()), args=[inner], keywords=[]),
                            value,
                        )
                    )
                else:
                    args.append(value)
            func = Attribute(value=Name(id=IMPORTED_CLASS_NAME, ctx=Load()), attr='from_parts', ctx=Load())
            return copy_location(Call(func=func, args=args, keywords=[]), node)
        return node


def transform_fstrings(tree: Module) -> Module:
    transformer = FStringTransformer()
    new_tree: Module = transformer.visit(tree)

    if transformer.has_transform:
        new_tree.body.insert(
            0,
            ImportFrom(
                module='lazystr.template',
                names=[
                    alias(name='InterpolatedString', asname=IMPORTED_CLASS_NAME),
                    alias(name='Interpolation', asname=IMPORTED_INTERPOLATE_NAME),
                ],
                level=0,
            ),
        )

    fix_missing_locations(new_tree)
    return new_tree


def check_template(arg: str) -> InterpolatedString:
    # arg is str from type checker perspective, but transform
    # converts prefixed f-strings into InterpolatedString instances.
    if isinstance(arg, InterpolatedString):
        return arg
    raise RuntimeError(f't (check_template) accepts only a prefixed f-string like t(f"{PREFIX}...")')


t = check_template


class TransformingLoader(importlib.abc.SourceLoader):
    def __init__(self, fullname: str, path: str) -> None:
        self.fullname = fullname
        self.path = path

    def get_filename(self, fullname: str) -> str:
        return self.path

    def get_data(self, path: str) -> bytes:
        with open(path, 'rb') as f:
            return f.read()

    def source_to_code(self, data, path, *, _optimize=-1):  # type: ignore[no-untyped-def,override]
        log.debug('Transforming prefixed f-strings in %s', path)
        tree = parse(data, filename=path)
        new_tree = transform_fstrings(tree)
        return compile(new_tree, path, 'exec', optimize=_optimize)


class TransformingFinder(PathFinder):
    def __init__(self, prefixes: List[str]) -> None:
        self._lazystr_prefixes = prefixes

    def find_spec(self, fullname, path=None, target=None):  # type: ignore[no-untyped-def,override]
        spec = super().find_spec(fullname, path, target=target)
        if any(fullname.startswith(it) for it in self._lazystr_prefixes):
            if spec and spec.origin and spec.origin.endswith('.py'):
                spec.loader = TransformingLoader(fullname, spec.origin)
                return spec
        return spec


def init(prefixes: List[str]) -> None:
    log.info('Installing f-string transform for %s', ', '.join(prefixes))
    sys.meta_path.insert(0, TransformingFinder(prefixes))
