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
"""Logger settings and project constants"""

# Standard imports
from logging.handlers import RotatingFileHandler
from pathlib import Path
import logging
import datetime as dt
import tempfile


# Paths
DIR_LOGS = tempfile.gettempdir() + "/"
CONFIG_FILE = "escpdoc.conf"
EMBEDDED_CONFIG_FILE = Path(__file__).parent / CONFIG_FILE
USER_CONFIG_FILE = Path.home() / ".local/share/escpdoc" / CONFIG_FILE
CONFIG_FILES = (Path("./" + CONFIG_FILE), USER_CONFIG_FILE)

# Control codes
ESC = "\x1b"
CR = "\r"
LF = "\n"
FF = "\f"
CRLF = CR + LF
CRFF = CR + FF

# Default 8 bits code page used to send the payload to the printer
DEFAULT_ENCODING = "cp437"

# Typefaces selectable with ESC k
TYPEFACE_NAMES = {
    0: "Roman",
    1: "Sans serif",
    2: "Courier",
    3: "Prestige",
    4: "Script",
    5: "OCR-B",
    6: "OCR-A",
    7: "Orator",
    8: "Orator-S",
    9: "Script C",
    10: "Roman T",
    11: "Sans serif H",
    30: "SV Busaba",
    31: "SV Jittra",
}

# Placeholder automatically resolved in headers & footers of reports
PAGE_NUMBER_PLACEHOLDER = "page_number"

# Logging
LOGGER_NAME = "escpdoc"
LOG_LEVEL = "DEBUG"

################################################################################


def logger(name=LOGGER_NAME):
    """Return logger of given name, without initialize it.

    Equivalent of logging.getLogger() call.
    """
    logger_obj = logging.getLogger(name)
    fmt_str = "%(levelname)s: [%(filename)s:%(lineno)s:%(funcName)s()] %(message)s"
    logging.basicConfig(format=fmt_str)
    return logger_obj


_logger = logging.getLogger(LOGGER_NAME)


# log file
formatter = logging.Formatter(
    "%(asctime)s :: %(levelname)s :: [%(filename)s:%(lineno)s:%(funcName)s()] :: %(message)s"
)
file_handler = RotatingFileHandler(
    DIR_LOGS
    + LOGGER_NAME
    + "_"
    + dt.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    + ".log",
    "a",
    100_000_000,
    1,
)
file_handler.setFormatter(formatter)
_logger.addHandler(file_handler)


def log_level(level):
    """Set terminal/file log level to the given one.

    .. note:: Don't forget the propagation system of messages:
        From logger to handlers. Handlers receive log messages only if
        the main logger doesn't filter them.
    """
    level = level.upper()
    if level == "NONE":
        # Override all severity levels under CRITICAL
        logging.disable()
        return
    else:
        # Remove the overriding level
        logging.disable(logging.NOTSET)
    # Main logger
    _logger.setLevel(level)
    # Handlers
    _ = [
        handler.setLevel(level)
        for handler in _logger.handlers
        if handler.__class__
        in (logging.StreamHandler, logging.handlers.RotatingFileHandler)
    ]


log_level(LOG_LEVEL)
