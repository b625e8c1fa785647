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
"""Paginate filled templates and build the printer payload"""

# Local imports
from escpdoc.commons import DEFAULT_ENCODING, PAGE_NUMBER_PLACEHOLDER, logger
from escpdoc.errors import CapacityError, ValidationError
from escpdoc.format_commands import FormatCommandBuilder
from escpdoc.page import Page, check_positive
from escpdoc.template import JsonTemplate, fill

LOGGER = logger()


class Report:
    """Document made of pages sharing the same header, footer & page format

    The payload sent to the printer is made of the page format commands
    followed by the text of each page.
    Header & footer lines can use the ``${page_number}`` placeholder.
    """

    def __init__(
        self,
        detail=(),
        header=(),
        footer=(),
        page_format: FormatCommandBuilder | None = None,
        page_length: int | None = None,
    ):
        """

        :key detail: Template lines of the body of the report.
        :key header: Template lines repeated at the top of each page.
        :key footer: Template lines repeated at the bottom of each page.
        :key page_format: Format settings emitted before the pages.
            Default: no settings, only the printer initialization.
        :key page_length: Maximum number of lines per page (header and footer
            included). Default: the page length of the page format, if the
            printer page length is not used; unlimited otherwise.
        :type detail: Iterable[str]
        :type header: Iterable[str]
        :type footer: Iterable[str]
        :raise CapacityError: If header and footer leave no room for the detail
            lines.
        """
        self.detail = tuple(detail)
        self.header = tuple(header)
        self.footer = tuple(footer)
        self.page_format = page_format or FormatCommandBuilder()

        if page_length is None and not self.page_format.use_printer_page_length:
            page_length = self.page_format.page_length
        check_positive("page_length", page_length)
        self.page_length = page_length

        if page_length is not None and len(self.header) + len(self.footer) >= page_length:
            raise CapacityError(
                f"No room for the detail lines: header and footer use "
                f"{len(self.header) + len(self.footer)} of {page_length} lines."
            )

    @classmethod
    def from_template(cls, template: JsonTemplate, page_length: int | None = None):
        """Get a report from a JSON template; the template is parsed if needed

        :raise ValidationError: If the template or its page format are not valid.
        """
        if template.parsed_text is None:
            template.parse()
        return cls(
            detail=template.detail,
            header=template.header,
            footer=template.footer,
            page_format=FormatCommandBuilder(**template.page_format),
            page_length=page_length,
        )

    def new_page(self, page_number: int, values) -> Page:
        """Get an empty page with filled header & footer"""
        page_values = dict(values) | {PAGE_NUMBER_PLACEHOLDER: page_number}
        return Page(
            header=[fill(line, page_values) for line in self.header],
            footer=[fill(line, page_values) for line in self.footer],
            page_number=page_number,
            page_length=self.page_length,
        )

    def paginate(self, values=None) -> list[Page]:
        """Fill the template with the given values and split it into pages

        :key values: Mapping of placeholder names to their resolved values.
        :type values: dict | None
        :return: Pages numbered from 1. A report without detail lines
            has 1 page.
        """
        values = values or {}
        pages = [self.new_page(1, values)]
        for line in self.detail:
            page = pages[-1]
            if page.is_full():
                page = self.new_page(len(pages) + 1, values)
                pages.append(page)
            page.append(fill(line, values))

        LOGGER.debug("Report paginated in %d page(s)", len(pages))
        return pages

    def render(self, values=None, auto_linefeed=False, auto_formfeed=False) -> str:
        """Get the printer payload: page format commands followed by the pages

        :key values: Mapping of placeholder names to their resolved values.
        :key auto_linefeed: See :meth:`escpdoc.page.Page.render`.
        :key auto_formfeed: See :meth:`escpdoc.page.Page.render`.
        """
        prefix = self.page_format.build()
        return prefix + "".join(
            page.render(auto_linefeed, auto_formfeed) for page in self.paginate(values)
        )

    def to_bytes(
        self,
        values=None,
        auto_linefeed=False,
        auto_formfeed=False,
        encoding=DEFAULT_ENCODING,
    ) -> bytes:
        """Get the printer payload as bytes

        Command parameters are sent as raw bytes; the text of the pages is
        encoded in the code page of the printer.

        :key encoding: Python codec of the printer code page. Default: cp437.
        :raise ValidationError: If the text can't be encoded with the given
            code page.
        """
        prefix = self.page_format.build().encode("latin_1")
        text = "".join(
            page.render(auto_linefeed, auto_formfeed) for page in self.paginate(values)
        )
        try:
            return prefix + text.encode(encoding)
        except (UnicodeEncodeError, LookupError) as exc:
            raise ValidationError(f"Text can't be encoded with {encoding}: {exc}") from exc
