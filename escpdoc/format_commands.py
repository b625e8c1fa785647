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
"""Build the ESC/P commands that set up the page format before printing

Only the settings that are defined produce a command; commands are always
emitted in the same order, after the printer initialization (ESC @).
"""
# Standard imports
import re

# Local imports
from escpdoc.commons import ESC, TYPEFACE_NAMES, logger
from escpdoc.errors import ValidationError

LOGGER = logger()

INIT = ESC + "@"

# Line spacings with a dedicated command
LINE_SPACING_COMMANDS = {
    "1/8": ESC + "0",
    "7/72": ESC + "1",
    "1/6": ESC + "2",
}
# n/denominator line spacings: denominator: (command, n min, n max)
LINE_SPACING_UNITS = {
    180: (ESC + "3", 1, 255),
    360: (ESC + "+", 1, 255),
    60: (ESC + "A", 0, 85),
}

# Master select (ESC !) values for each character pitch (cpi)
# bit 1: 12 cpi (elite), bit 4: condensed
CHARACTER_PITCH_MAPPING = {
    10: 0,
    12: 1,
    17: 4,
    20: 5,
}

# ESC k values; names are lowered and dashed: "Sans serif" => "sans-serif"
TYPEFACE_MAPPING = {
    name.lower().replace(" ", "-"): value for value, name in TYPEFACE_NAMES.items()
}


def line_spacing_command(line_spacing: str) -> str:
    """Get the command that sets the given line spacing

    Supported values: 1/8, 7/72, 1/6 inch and n/180, n/360, n/60 inch.

    :param line_spacing: Fraction of inch, ex: "1/8".
    :raise ValidationError: If the spacing is malformed or not supported.
    """
    if not isinstance(line_spacing, str):
        raise ValidationError(f"line_spacing: a fraction is expected ({line_spacing!r})")
    line_spacing = line_spacing.replace(" ", "")

    if command := LINE_SPACING_COMMANDS.get(line_spacing):
        return command

    match = re.fullmatch(r"(\d+)/(\d+)", line_spacing)
    if not match:
        raise ValidationError(f"line_spacing: malformed value ({line_spacing!r})")

    numerator, denominator = map(int, match.groups())
    if denominator not in LINE_SPACING_UNITS:
        raise ValidationError(f"line_spacing: unsupported unit ({line_spacing!r})")

    command, n_min, n_max = LINE_SPACING_UNITS[denominator]
    if not n_min <= numerator <= n_max:
        raise ValidationError(
            f"line_spacing: n must be in [{n_min}, {n_max}] for n/{denominator} "
            f"({line_spacing!r})"
        )
    return command + chr(numerator)


def to_character_pitch(character_pitch: str | int) -> int:
    """Get a supported character pitch in cpi

    :raise ValidationError: If the pitch has no master select equivalent.
    """
    if isinstance(character_pitch, str) and character_pitch.strip().isdigit():
        character_pitch = int(character_pitch)

    if (
        isinstance(character_pitch, bool)
        or not isinstance(character_pitch, int)
        or character_pitch not in CHARACTER_PITCH_MAPPING
    ):
        raise ValidationError(
            f"character_pitch: expect one of {tuple(CHARACTER_PITCH_MAPPING)} "
            f"({character_pitch!r})"
        )
    return character_pitch


def to_typeface(typeface: str | int) -> int:
    """Get the ESC k value of the given typeface

    :param typeface: Name of the typeface (case insensitive, spaces or dashes),
        ex: "roman", "sans-serif", "Sans serif"; or directly its ESC k value.
    :raise ValidationError: If the typeface is unknown.
    """
    if isinstance(typeface, int) and not isinstance(typeface, bool):
        if typeface in TYPEFACE_NAMES:
            return typeface
    elif isinstance(typeface, str):
        name = re.sub(r"[\s_]+", "-", typeface.strip().lower())
        if name in TYPEFACE_MAPPING:
            return TYPEFACE_MAPPING[name]
    raise ValidationError(f"typeface: unknown typeface ({typeface!r})")


def to_count(name: str, value: int, minimum=0, maximum=255) -> int:
    """Check that a numeric parameter fits in its command byte

    :raise ValidationError: If the value is not an integer in [minimum, maximum].
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name}: an integer is expected ({value!r})")
    if not minimum <= value <= maximum:
        raise ValidationError(f"{name}: expect a value in [{minimum}, {maximum}] ({value})")
    return value


class FormatCommandBuilder:
    """Accumulate page format settings and serialize them into ESC/P commands

    Each setting is optional; a setting set to None is not emitted.
    Values are checked when they are set.

    Example::

        >>> page_format = FormatCommandBuilder(line_spacing="1/8", typeface="roman")
        >>> page_format.build()
        '\\x1b@\\x1b0\\x1bk\\x00'
    """

    def __init__(
        self,
        line_spacing: str | None = None,
        character_pitch: str | int | None = None,
        page_length: int | None = None,
        use_printer_page_length: bool = False,
        page_width: int | None = None,
        left_margin: int | None = None,
        right_margin: int | None = None,
        bottom_margin: int | None = None,
        typeface: str | int | None = None,
    ):
        """

        :key line_spacing: Fraction of inch between 2 lines; ex: "1/8", "1/6".
        :key character_pitch: Characters per inch: 10, 12, 17 or 20.
        :key page_length: Page length in lines (of the current line spacing).
        :key use_printer_page_length: If True, the page length configured on the
            printer is kept and page_length is not emitted.
        :key page_width: Page width in columns.
        :key left_margin: Left margin in columns.
        :key right_margin: Right margin in columns, from the right edge of
            the page width. Requires page_width.
        :key bottom_margin: Bottom margin in lines.
        :key typeface: Name of the typeface; ex: "roman", "sans-serif".
        """
        self._line_spacing = None
        self._character_pitch = None
        self._page_length = None
        self._page_width = None
        self._left_margin = None
        self._right_margin = None
        self._bottom_margin = None
        self._typeface = None
        self.line_spacing = line_spacing
        self.character_pitch = character_pitch
        self.page_length = page_length
        self.use_printer_page_length = bool(use_printer_page_length)
        self.page_width = page_width
        self.left_margin = left_margin
        self.right_margin = right_margin
        self.bottom_margin = bottom_margin
        self.typeface = typeface

    @property
    def line_spacing(self) -> str | None:
        return self._line_spacing

    @line_spacing.setter
    def line_spacing(self, line_spacing: str | None):
        if line_spacing is not None:
            line_spacing_command(line_spacing)
        self._line_spacing = line_spacing

    @property
    def character_pitch(self) -> int | None:
        return self._character_pitch

    @character_pitch.setter
    def character_pitch(self, character_pitch: str | int | None):
        self._character_pitch = (
            None if character_pitch is None else to_character_pitch(character_pitch)
        )

    @property
    def page_length(self) -> int | None:
        return self._page_length

    @page_length.setter
    def page_length(self, page_length: int | None):
        # ESC C NUL is another command (page length in inches)
        self._page_length = (
            None if page_length is None else to_count("page_length", page_length, 1)
        )

    @property
    def page_width(self) -> int | None:
        return self._page_width

    @page_width.setter
    def page_width(self, page_width: int | None):
        self._page_width = (
            None if page_width is None else to_count("page_width", page_width)
        )

    @property
    def left_margin(self) -> int | None:
        return self._left_margin

    @left_margin.setter
    def left_margin(self, left_margin: int | None):
        self._left_margin = (
            None if left_margin is None else to_count("left_margin", left_margin)
        )

    @property
    def right_margin(self) -> int | None:
        return self._right_margin

    @right_margin.setter
    def right_margin(self, right_margin: int | None):
        self._right_margin = (
            None if right_margin is None else to_count("right_margin", right_margin)
        )

    @property
    def bottom_margin(self) -> int | None:
        return self._bottom_margin

    @bottom_margin.setter
    def bottom_margin(self, bottom_margin: int | None):
        self._bottom_margin = (
            None if bottom_margin is None else to_count("bottom_margin", bottom_margin)
        )

    @property
    def typeface(self) -> int | None:
        """Get the ESC k value of the typeface"""
        return self._typeface

    @typeface.setter
    def typeface(self, typeface: str | int | None):
        self._typeface = None if typeface is None else to_typeface(typeface)

    def right_margin_position(self) -> int:
        """Get the right margin position in columns, from the left edge

        ESC Q expects an absolute position: page width - right margin.

        :raise ValidationError: If there is no page width, or if the
            position is not on the right of the left margin.
        """
        if self._page_width is None:
            raise ValidationError("right_margin: a page width is required")

        position = self._page_width - self._right_margin
        if position <= (self._left_margin or 0):
            raise ValidationError(
                f"right_margin: position {position} is not on the right of "
                f"the left margin ({self._left_margin or 0})"
            )
        return position

    def _encode_line_spacing(self):
        return line_spacing_command(self._line_spacing)

    def _encode_character_pitch(self):
        return ESC + "!" + chr(CHARACTER_PITCH_MAPPING[self._character_pitch])

    def _encode_page_length(self):
        return ESC + "C" + chr(self._page_length)

    def _encode_page_width(self):
        return ESC + "Q" + chr(self._page_width)

    def _encode_left_margin(self):
        return ESC + "l" + chr(self._left_margin)

    def _encode_right_margin(self):
        return ESC + "Q" + chr(self.right_margin_position())

    def _encode_bottom_margin(self):
        return ESC + "N" + chr(self._bottom_margin)

    def _encode_typeface(self):
        return ESC + "k" + chr(self._typeface)

    # Emission order of the commands: (predicate, encoder)
    # The page width is carried by the right margin command if any.
    COMMANDS = (
        (lambda fmt: fmt.line_spacing is not None, _encode_line_spacing),
        (lambda fmt: fmt.character_pitch is not None, _encode_character_pitch),
        (
            lambda fmt: fmt.page_length is not None and not fmt.use_printer_page_length,
            _encode_page_length,
        ),
        (
            lambda fmt: fmt.page_width is not None and fmt.right_margin is None,
            _encode_page_width,
        ),
        (lambda fmt: fmt.left_margin is not None, _encode_left_margin),
        (lambda fmt: fmt.right_margin is not None, _encode_right_margin),
        (lambda fmt: fmt.bottom_margin is not None, _encode_bottom_margin),
        (lambda fmt: fmt.typeface is not None, _encode_typeface),
    )

    def commands(self) -> list[str]:
        """Get the list of commands for the current settings, without ESC @"""
        return [encoder(self) for predicate, encoder in self.COMMANDS if predicate(self)]

    def build(self) -> str:
        """Get the ESC/P prefix that initializes the printer and sets the page format

        :raise ValidationError: If the right margin can't be positioned.
        """
        result = INIT + "".join(self.commands())
        LOGGER.debug("Page format commands: %r", result)
        return result
