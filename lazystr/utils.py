import logging
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

R = TypeVar('R', covariant=True)
P = ParamSpec('P')


def scream(fn: Callable[P, R]) -> Callable[P, R]:
    @wraps(fn)
    def inner(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return fn(*args, **kwargs)
        except Exception:
            logging.exception('Scream')
            raise

    return inner
