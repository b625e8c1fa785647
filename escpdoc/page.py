#  EscpDoc is a software allowing to render document templates into
#  EPSON ESC/P printer control streams.
#  Copyright (C) 2024-2025  Ysard
#
#  This program is free software: you can redistribute it and/or modify
#  it under the terms of the GNU Affero General Public License as published by
#  the Free Software Foundation, either version 3 of the License, or
#  (at your option) any later version.
#
#  This program is distributed in the hope that it will be useful,
#  but WITHOUT ANY WARRANTY; without even the implied warranty of
#  MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#  GNU Affero General Public License for more details.
#
#  You should have received a copy of the GNU Affero General Public License
#  along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Page of a document: header, content & footer lines"""

# Local imports
from escpdoc.commons import CR, CRLF, CRFF, logger
from escpdoc.errors import CapacityError, RangeError, ValidationError
from escpdoc.lines import LINE_VARIANTS, Line, TextLine, render_line

LOGGER = logger()


def to_line(line: str | Line) -> Line:
    """Get a line from a string or an already built line

    :raise ValidationError: If the object is neither a string nor a line.
    """
    if isinstance(line, str):
        return TextLine(line)
    if not isinstance(line, LINE_VARIANTS):
        raise ValidationError(f"Unexpected line type ({type(line).__name__})")
    return line


def check_positive(name: str, value: int | None):
    """Check that the given optional value is a strictly positive integer

    :raise ValidationError: If the value is set but not valid.
    """
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{name}: a positive integer is expected ({value!r})")


class Page:
    """One page of a document

    Lines are addressed from 1, through the header, the content then
    the footer. The header & the footer are fixed at construction; the content
    grows with :meth:`append` or is replaced via :attr:`content`.

    If a page length is defined, the total number of lines never exceeds it.

    .. warning:: A page is not thread-safe; concurrent modifications of the same
        page must be serialized by the caller.
    """

    def __init__(
        self,
        content=None,
        header=None,
        footer=None,
        page_number: int | None = None,
        page_length: int | None = None,
    ):
        """

        :key content: Lines (or strings) of the body of the page.
        :key header: Lines (or strings) printed before the content.
            None if the page has no header.
        :key footer: Lines (or strings) printed after the content.
            None if the page has no footer.
        :key page_number: Position of the page in its document, starting from 1.
        :key page_length: Maximum number of lines of the page.
            None for unlimited lines.
        :type content: Iterable[str | Line] | None
        :type header: Iterable[str | Line] | None
        :type footer: Iterable[str | Line] | None
        :raise CapacityError: If the given lines don't fit in the page length.
        :raise ValidationError: If the page number or length are not positive
            integers.
        """
        check_positive("page_number", page_number)
        check_positive("page_length", page_length)
        self._header = tuple(map(to_line, header or ()))
        self._footer = tuple(map(to_line, footer or ()))
        self._page_number = page_number
        self._page_length = page_length

        if page_length is not None and len(self._header) + len(self._footer) > page_length:
            raise CapacityError(
                f"Header and footer ({len(self._header)} + {len(self._footer)} lines) "
                f"exceed the page length ({page_length})."
            )

        self._content = []
        self.content = content or ()

    def __repr__(self):
        return (
            f"Page(page_number={self._page_number}, page_length={self._page_length}, "
            f"lines={self.number_of_lines()})"
        )

    @property
    def header(self) -> tuple[Line, ...]:
        """Get the header lines of the page"""
        return self._header

    @property
    def footer(self) -> tuple[Line, ...]:
        """Get the footer lines of the page"""
        return self._footer

    @property
    def content(self) -> tuple[Line, ...]:
        """Get the content lines of the page"""
        return tuple(self._content)

    @content.setter
    def content(self, content):
        """Replace the whole content of the page

        :param content: New lines (or strings) of the page body.
        :type content: Iterable[str | Line]
        :raise CapacityError: If the new content doesn't fit in the page;
            the previous content is kept.
        """
        new_content = list(map(to_line, content))
        if self._page_length is not None:
            number_of_lines = len(self._header) + len(self._footer) + len(new_content)
            if number_of_lines > self._page_length:
                raise CapacityError(
                    f"Page overflow: {number_of_lines} lines for a page length "
                    f"of {self._page_length}."
                )
        self._content = new_content

    def set_content(self, content):
        """Replace the whole content of the page; see :attr:`content`"""
        self.content = content

    @property
    def page_number(self) -> int | None:
        """Get the page number (the first page is 1)"""
        return self._page_number

    @page_number.setter
    def page_number(self, page_number: int | None):
        check_positive("page_number", page_number)
        self._page_number = page_number

    @property
    def page_length(self) -> int | None:
        """Get the maximum number of lines of the page; None if unlimited"""
        return self._page_length

    def is_full(self) -> bool:
        """Check if no new line can be written in the page anymore"""
        if self._page_length is None:
            return False
        return self.number_of_lines() >= self._page_length

    def append(self, line: str | Line):
        """Add a line after the last line of the content

        :param line: Line to be added; strings are converted to text lines.
        :raise CapacityError: If the page is full.
        """
        if self.is_full():
            raise CapacityError(f"Page is full ({self._page_length} lines).")
        self._content.append(to_line(line))

    def number_of_lines(self) -> int:
        """Get the number of lines of the header, the content and the footer"""
        return len(self._header) + len(self._content) + len(self._footer)

    def lines(self) -> tuple[Line, ...]:
        """Get all the lines of the page: header, content then footer"""
        return self._header + tuple(self._content) + self._footer

    def get(self, line_number: int) -> Line:
        """Get the line at the given position in the page

        :param line_number: Line number, starting from 1.
        :raise RangeError: If the line number doesn't address a line.
        """
        if not 1 <= line_number <= self.number_of_lines():
            raise RangeError(f"Number of lines [{line_number}] is out of range.")

        if line_number <= len(self._header):
            return self._header[line_number - 1]
        line_number -= len(self._header)
        if line_number <= len(self._content):
            return self._content[line_number - 1]
        line_number -= len(self._content)
        return self._footer[line_number - 1]

    def render(self, auto_linefeed: bool = False, auto_formfeed: bool = False) -> str:
        """Convert the page into a string that can be sent to the printer

        Placeholders are not substituted here; the lines must already be
        filled.

        :key auto_linefeed: True if automatic line-feed is enabled on the printer;
            CR will be used as line separator. CRLF will be used otherwise.
        :key auto_formfeed: True to add CR FF at the end of the page.
        :return: Text of the page with its control codes.
        """
        line_separator = CR if auto_linefeed else CRLF
        texts = [
            text + line_separator
            for line in self.lines()
            if (text := render_line(line)) is not None
        ]
        if auto_formfeed:
            texts.append(CRFF)

        LOGGER.debug(
            "Render page %s: %d lines, auto linefeed: %s, auto formfeed: %s",
            self._page_number, len(texts) - auto_formfeed, auto_linefeed, auto_formfeed,
        )
        return "".join(texts)
