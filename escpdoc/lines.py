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
"""Printable lines of a page

Lines form a closed set of variants; :data:`Line` is their union and
:func:`render_line` handles each of them.
Only text lines exist for now.
"""
# Standard imports
from dataclasses import dataclass

# Local imports
from escpdoc.errors import ValidationError


@dataclass(frozen=True)
class TextLine:
    """Line made of a literal text, already resolved"""

    text: str

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise ValidationError(f"Text expected for a TextLine ({self.text!r})")


Line = TextLine
LINE_VARIANTS = (TextLine,)


def render_line(line: Line) -> str | None:
    """Get the printable text of the given line

    :return: The text of the line, or None if the variant doesn't print text.
    """
    match line:
        case TextLine(text=text):
            return text
        case _:
            return None
