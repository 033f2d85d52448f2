from typing import Optional


class ClosureArityError(RuntimeError):
    def __init__(self, fn: object, count: int, keywords: Optional[list[str]] = None) -> None:
        if keywords:
            message = (
                'Trying to render an InterpolatedString containing a callable with required keyword-only '
                f'parameters: {", ".join(keywords)}'
            )
        else:
            message = f'Trying to render an InterpolatedString containing a callable taking {count} parameters'
        super().__init__(message)
        self.fn = fn
        self.count = count
        self.keywords = keywords or []


class StringWriterError(RuntimeError):
    pass


class UnsupportedEncodingError(LookupError):
    def __init__(self, encoding: str) -> None:
        super().__init__(f'Unsupported encoding: {encoding!r}')
        self.encoding = encoding
