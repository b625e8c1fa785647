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
"""Test page format commands built from settings"""

# Standard imports
import itertools as it

# Custom imports
import pytest

# Local imports
from escpdoc.errors import ValidationError
from escpdoc.format_commands import FormatCommandBuilder
from .misc import (
    esc_reset,
    line_spacing_18,
    condensed_pitch,
    roman_typeface,
    sans_serif_typeface,
    page_length_cmd,
)


def test_no_settings():
    """Only the printer initialization is emitted"""
    assert FormatCommandBuilder().build() == esc_reset


@pytest.mark.parametrize(
    "settings, expected",
    [
        ({"line_spacing": "1/8"}, esc_reset + line_spacing_18),
        ({"line_spacing": "1/6"}, esc_reset + "\x1b2"),
        ({"line_spacing": "7/72"}, esc_reset + "\x1b1"),
        ({"line_spacing": "30/180"}, esc_reset + "\x1b3\x1e"),
        ({"line_spacing": "60/360"}, esc_reset + "\x1b+\x3c"),
        ({"line_spacing": "10/60"}, esc_reset + "\x1bA\x0a"),
        ({"character_pitch": "17"}, esc_reset + condensed_pitch),
        ({"character_pitch": 10}, esc_reset + "\x1b!\x00"),
        ({"character_pitch": "12"}, esc_reset + "\x1b!\x01"),
        ({"character_pitch": 20}, esc_reset + "\x1b!\x05"),
        ({"page_length": 10, "use_printer_page_length": False}, esc_reset + page_length_cmd(10)),
        ({"page_length": 10, "use_printer_page_length": True}, esc_reset),
        ({"page_length": 200}, esc_reset + page_length_cmd(200)),
        ({"page_width": 40}, esc_reset + "\x1bQ\x28"),
        (
            {"page_width": 80, "left_margin": 5, "right_margin": 10},
            esc_reset + "\x1bl\x05" + "\x1bQ\x46",
        ),
        ({"left_margin": 5}, esc_reset + "\x1bl\x05"),
        ({"bottom_margin": 80}, esc_reset + "\x1bN\x50"),
        ({"typeface": "roman"}, esc_reset + roman_typeface),
        ({"typeface": "sans-serif"}, esc_reset + sans_serif_typeface),
        ({"typeface": "Sans serif"}, esc_reset + sans_serif_typeface),
        ({"typeface": "OCR-B"}, esc_reset + "\x1bk\x05"),
        ({"typeface": "sv_jittra"}, esc_reset + "\x1bk\x1f"),
    ],
    ids=[
        "spacing_1/8",
        "spacing_1/6",
        "spacing_7/72",
        "spacing_n/180",
        "spacing_n/360",
        "spacing_n/60",
        "pitch_17",
        "pitch_10",
        "pitch_12",
        "pitch_20",
        "page_length",
        "printer_page_length",
        "page_length_200",
        "page_width",
        "left_right_margins",
        "left_margin",
        "bottom_margin",
        "roman",
        "sans-serif",
        "sans-serif_name",
        "ocr-b",
        "sv-jittra",
    ],
)
def test_single_setting(settings, expected):
    """Test the command emitted for each setting"""
    page_format = FormatCommandBuilder()
    for key, value in settings.items():
        setattr(page_format, key, value)

    assert page_format.build() == expected
    # Same result from the constructor
    assert FormatCommandBuilder(**settings).build() == expected


def test_fixtures_lengths():
    """Check lengths of the built prefixes

    ESC @ ESC 0 => 4 characters; ESC @ ESC ! 4 => 5 characters;
    ESC @ only if the page length of the printer is used.
    """
    assert len(FormatCommandBuilder(line_spacing="1/8").build()) == 4
    assert len(FormatCommandBuilder(character_pitch="17").build()) == 5

    page_format = FormatCommandBuilder(page_length=10)
    page_format.use_printer_page_length = True
    assert len(page_format.build()) == 2

    page_format.use_printer_page_length = False
    assert page_format.build() == "\x1b@\x1bC\x0a"


def test_all_settings_order():
    """Commands are emitted in a fixed order, whatever the setters order"""
    settings = {
        "typeface": "sans-serif",
        "bottom_margin": 3,
        "right_margin": 10,
        "left_margin": 5,
        "page_width": 80,
        "page_length": 66,
        "character_pitch": 12,
        "line_spacing": "1/6",
    }
    expected = (
        esc_reset
        + "\x1b2"  # line spacing
        + "\x1b!\x01"  # character pitch
        + page_length_cmd(66)
        + "\x1bl\x05"  # left margin
        + "\x1bQ\x46"  # right margin: 80 - 10
        + "\x1bN\x03"  # bottom margin
        + sans_serif_typeface
    )

    for keys in it.islice(it.permutations(settings), 0, None, 997):
        page_format = FormatCommandBuilder()
        for key in keys:
            setattr(page_format, key, settings[key])

        assert page_format.build() == expected


def test_idempotent_build():
    """Repeated calls give identical results"""
    page_format = FormatCommandBuilder(line_spacing="1/8", page_width=80, typeface="roman")

    assert page_format.build() == page_format.build()
    assert page_format.commands() == ["\x1b0", "\x1bQ\x50", roman_typeface]


def test_clear_setting():
    """A setting set to None is not emitted anymore"""
    page_format = FormatCommandBuilder(line_spacing="1/8", typeface="roman")
    page_format.typeface = None

    assert page_format.build() == esc_reset + line_spacing_18


@pytest.mark.parametrize(
    "key, value",
    [
        ("line_spacing", "1/7"),
        ("line_spacing", "1/"),
        ("line_spacing", "eighth"),
        ("line_spacing", "0/180"),
        ("line_spacing", "86/60"),
        ("line_spacing", 8),
        ("character_pitch", "15"),
        ("character_pitch", "pica"),
        ("character_pitch", 17.14),
        ("page_length", 0),
        ("page_length", 256),
        ("page_width", -1),
        ("page_width", 256),
        ("left_margin", "5"),
        ("right_margin", True),
        ("bottom_margin", 1.5),
        ("typeface", "comic-sans"),
        ("typeface", 12),
        ("typeface", ""),
    ],
)
def test_invalid_settings(key, value):
    """Invalid values are refused by the setters; the setting is unchanged"""
    page_format = FormatCommandBuilder()

    with pytest.raises(ValidationError, match=key):
        setattr(page_format, key, value)

    assert getattr(page_format, key) is None
    assert page_format.build() == esc_reset


def test_right_margin_without_page_width():
    """The right margin is relative to the page width"""
    page_format = FormatCommandBuilder(right_margin=10)

    with pytest.raises(ValidationError, match="page width is required"):
        page_format.build()


@pytest.mark.parametrize(
    "page_width, left_margin, right_margin",
    [(80, None, 80), (80, 70, 10), (40, 35, 10)],
)
def test_right_margin_before_left_margin(page_width, left_margin, right_margin):
    """The right margin position must be on the right of the left margin"""
    page_format = FormatCommandBuilder(
        page_width=page_width, left_margin=left_margin, right_margin=right_margin
    )

    with pytest.raises(ValidationError, match="right_margin"):
        page_format.build()
