from typing import Any, Iterator, List, Tuple

from .template import InterpolatedString


class ListQueryParams:
    mark: str

    def render(self, s: InterpolatedString) -> Tuple[str, List[Any]]:
        params: List[Any] = []
        return ''.join(self.iter(s, params)), params

    def iter(self, s: InterpolatedString, params: List[Any]) -> Iterator[str]:
        mark = self.mark
        for it in s.parts():
            if type(it) is str:
                yield it
            else:
                value = it.value  # type: ignore[union-attr]
                if isinstance(value, InterpolatedString):
                    yield from self.iter(value, params)
                else:
                    yield mark
                    params.append(value)


class QMarkQueryParams(ListQueryParams):
    mark = '?'


class FormatQueryParams(ListQueryParams):
    mark = '%s'


MARKS = {'qmark': QMarkQueryParams, 'format': FormatQueryParams}
