from typing import Any

from lazystr.sql import FormatQueryParams, QMarkQueryParams
from lazystr.template import InterpolatedString
from lazystr.template import t as tt


def render(s: InterpolatedString) -> tuple[str, list[Any]]:
    return QMarkQueryParams().render(s)


def test_simple():
    name = 'zoom'
    s, p = render(tt('SELECT * FROM boo WHERE name = {name}'))
    assert s == 'SELECT * FROM boo WHERE name = ?'
    assert p == ['zoom']


def test_nested():
    where = tt('id = {10} AND name = {None}')
    s, p = render(tt('SELECT * FROM boo WHERE {where} LIMIT {5}'))
    assert s == 'SELECT * FROM boo WHERE id = ? AND name = ? LIMIT ?'
    assert p == [10, None, 5]


def test_concat():
    sql = tt('SELECT * FROM boo WHERE a = {1}') + ' AND ' + tt('b = {2}')
    assert render(sql) == ('SELECT * FROM boo WHERE a = ? AND b = ?', [1, 2])


def test_format_marks():
    sql = tt('UPDATE boo SET a = {1} WHERE b = {2}')
    assert FormatQueryParams().render(sql) == ('UPDATE boo SET a = %s WHERE b = %s', [1, 2])
