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
"""Exceptions raised while building pages and format commands

All of them are raised before any modification of the targeted object.
"""


class ESCPDocError(Exception):
    """Base class of the errors raised by the rendering routines"""


class CapacityError(ESCPDocError):
    """A page can't receive more lines than its page length"""


class RangeError(ESCPDocError, IndexError):
    """A line number is outside the lines of a page"""


class ValidationError(ESCPDocError, ValueError):
    """A format setting or a line has an unexpected value"""
