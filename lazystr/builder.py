import io
from typing import Any, List
from xml.etree import ElementTree as etree

from .template import Builder, Interpolation, InterpolatedString, TemplatePart, write_slot

__all__ = ['Builder', 'PartsBuilder', 'ElementBuilder', 'build_element']


class PartsBuilder:
    def __init__(self) -> None:
        self.result: List[TemplatePart] = []

    def literal(self, text: str) -> None:
        self.result.append(text)

    def value(self, value: Any) -> None:
        self.result.append(Interpolation(value))


class ElementBuilder:
    """Collects template pieces as ``<literal>`` and ``<value>`` elements.

    Values are rendered with the same rules as ``InterpolatedString.write_to``
    and keep their python type name in the ``type`` attribute.
    """

    def __init__(self, tag: str = 'template') -> None:
        self.tag = tag
        self.tb = etree.TreeBuilder()
        self.tb.start(tag, {})

    def literal(self, text: str) -> None:
        self.tb.start('literal', {})
        self.tb.data(text)
        self.tb.end('literal')

    def value(self, value: Any) -> None:
        buf = io.StringIO()
        write_slot(buf, value)
        self.tb.start('value', {'type': type(value).__name__})
        self.tb.data(buf.getvalue())
        self.tb.end('value')

    def close(self) -> etree.Element:
        self.tb.end(self.tag)
        return self.tb.close()


def build_element(s: InterpolatedString, tag: str = 'template') -> etree.Element:
    builder = ElementBuilder(tag)
    s.build(builder)
    return builder.close()
