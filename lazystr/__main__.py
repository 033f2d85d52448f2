import json
import logging
import sys
from typing import Any, Dict, Tuple

import click

from lazystr import sql
from lazystr.template import InterpolatedString, parse_template
from lazystr.utils import scream


def parse_vars(items: Tuple[str, ...]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for it in items:
        name, sep, value = it.partition('=')
        if not sep:
            raise click.BadParameter(f'expected NAME=VALUE, got {it!r}', param_hint='-v')
        try:
            result[name] = json.loads(value)
        except ValueError:
            result[name] = value
    return result


def load(template: str, variables: Tuple[str, ...]) -> InterpolatedString:
    return parse_template(template, parse_vars(variables))


@click.group()
def cli() -> None:
    logging.basicConfig(level='INFO', stream=sys.stdout)


@cli.command('render')
@click.argument('template')
@click.option('-v', '--var', 'variables', multiple=True, help='NAME=VALUE, VALUE is parsed as JSON when possible')
@scream
def render(template: str, variables: Tuple[str, ...]) -> None:
    click.echo(str(load(template, variables)))


@cli.command('parts')
@click.argument('template')
@click.option('-v', '--var', 'variables', multiple=True)
@scream
def parts(template: str, variables: Tuple[str, ...]) -> None:
    s = load(template, variables)
    click.echo(json.dumps(s.as_record(), indent=2, ensure_ascii=False, default=str))


@cli.command('sql')
@click.argument('template')
@click.option('-v', '--var', 'variables', multiple=True)
@click.option('--mark', type=click.Choice(sorted(sql.MARKS)), default='qmark')
@scream
def bind_sql(template: str, variables: Tuple[str, ...], mark: str) -> None:
    query, params = sql.MARKS[mark]().render(load(template, variables))
    click.echo(query)
    click.echo(json.dumps(params, ensure_ascii=False, default=str))


if __name__ == '__main__':
    cli()
