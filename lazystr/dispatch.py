from typing import Any


class Unsupported:
    def __repr__(self) -> str:
        return 'UNSUPPORTED'

    def __bool__(self) -> bool:
        return False


UNSUPPORTED = Unsupported()


def invoke(target: Any, name: str, *args: Any, **kwargs: Any) -> Any:
    """Call ``name`` on ``target``, forwarding to ``str(target)`` when unsupported.

    Targets exposing ``dispatch(name, *args, **kwargs)`` handle their native
    operations themselves and return ``UNSUPPORTED`` for anything else, in
    which case the call goes to the same method of the rendered text.
    """
    dispatch = getattr(target, 'dispatch', None)
    if dispatch is None:
        return getattr(target, name)(*args, **kwargs)

    result = dispatch(name, *args, **kwargs)
    if result is UNSUPPORTED:
        return getattr(str(target), name)(*args, **kwargs)
    return result
