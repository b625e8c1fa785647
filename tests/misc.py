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
"""Common variables, commands & fixtures used in tests"""
# Custom imports
import pytest

# Local imports
from escpdoc.commons import log_level

esc_reset = "\x1B\x40"  # ESC @
line_spacing_18 = "\x1B0"  # ESC 0
line_spacing_16 = "\x1B2"  # ESC 2
condensed_pitch = "\x1B!\x04"  # ESC ! 4
roman_typeface = "\x1Bk\x00"  # ESC k 0
sans_serif_typeface = "\x1Bk\x01"  # ESC k 1


def page_length_cmd(lines: int) -> str:
    """Get ESC C n command"""
    return "\x1BC" + chr(lines)


@pytest.fixture()
def tear_down():
    yield None

    # Restore previous loglevel for further tests
    log_level("debug")
