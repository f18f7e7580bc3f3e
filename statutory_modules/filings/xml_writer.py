"""
Line-oriented XML writer for regulator documents.

The receiving systems compare documents element by element, so output is
emitted in a fixed order with two-space indentation and one element per
line.  Text is escaped for all five XML special characters, including
quotes, which ``xml.etree`` leaves alone in element text.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from xml.sax.saxutils import escape, quoteattr

from statutory_kernel.db.types import round_money

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_text(value: object) -> str:
    """Escape ``& < > " '`` in element text."""
    return escape(str(value), _ENTITIES)


def format_amount(value: Decimal) -> str:
    """Fixed two-decimal string, half-up; never ``-0.00``."""
    rounded = round_money(value)
    if rounded == 0:
        return "0.00"
    return f"{rounded:.2f}"


def format_rate(value: Decimal) -> str:
    """A VAT rate as a plain number: ``23``, ``10.5``."""
    return f"{Decimal(value).normalize():f}"


def format_date(value: date | str) -> str:
    """ISO ``YYYY-MM-DD``; the time of a ``datetime`` is dropped."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]


class XmlWriter:
    """
    Accumulates an XML document line by line.

    Usage::

        writer = XmlWriter()
        with writer.element_block("dokument", xmlns=NS):
            writer.element("rok", 2025)
        xml = writer.getvalue()
    """

    def __init__(self, indent: str = "  "):
        self._indent = indent
        self._lines: list[str] = [XML_DECLARATION]
        self._stack: list[str] = []

    @property
    def _prefix(self) -> str:
        return self._indent * len(self._stack)

    def open(self, tag: str, **attributes: str) -> None:
        attrs = "".join(
            f" {name.replace('__', ':')}={quoteattr(value)}"
            for name, value in attributes.items()
        )
        self._lines.append(f"{self._prefix}<{tag}{attrs}>")
        self._stack.append(tag)

    def close(self) -> None:
        tag = self._stack.pop()
        self._lines.append(f"{self._prefix}</{tag}>")

    @contextmanager
    def element_block(self, tag: str, **attributes: str) -> Iterator[XmlWriter]:
        """Open ``tag``, yield, close it.  ``xmlns__xsi`` becomes ``xmlns:xsi``."""
        self.open(tag, **attributes)
        yield self
        self.close()

    def element(self, tag: str, text: object) -> None:
        self._lines.append(f"{self._prefix}<{tag}>{escape_text(text)}</{tag}>")

    def amount(self, tag: str, value: Decimal) -> None:
        self._lines.append(f"{self._prefix}<{tag}>{format_amount(value)}</{tag}>")

    def comment(self, text: str) -> None:
        self._lines.append(f"{self._prefix}<!-- {text} -->")

    def getvalue(self) -> str:
        if self._stack:
            raise RuntimeError(f"unclosed elements: {self._stack}")
        return "\n".join(self._lines)
