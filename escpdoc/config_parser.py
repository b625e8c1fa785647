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
"""Load configuration file, check and set default values"""

# Standard imports
import codecs
import configparser
from logging import DEBUG

# Local imports
from escpdoc.commons import (
    logger,
    log_level,
    EMBEDDED_CONFIG_FILE,
    LOG_LEVEL,
    DEFAULT_ENCODING,
)
from escpdoc.errors import ValidationError
from escpdoc.format_commands import FormatCommandBuilder

LOGGER = logger()

# Numeric settings of the page_format section
PAGE_FORMAT_INT_SETTINGS = (
    "page_length",
    "page_width",
    "left_margin",
    "right_margin",
    "bottom_margin",
)
PAGE_FORMAT_STR_SETTINGS = ("line_spacing", "character_pitch", "typeface")


def load_config(config_file=EMBEDDED_CONFIG_FILE):
    """Load configuration file and set default settings

    :key config_file: Path of the configuration file to load.
        Default: EMBEDDED_CONFIG_FILE from commons module.
    :type config_file: Path
    :return: Configuration updated object.
    :rtype: configparser.ConfigParser
    """
    config = configparser.ConfigParser(allow_no_value=True)
    config.read(config_file)
    return parse_config(config)


def parse_config(config: configparser.ConfigParser):
    """Read config file, check and set default values

    .. note:: All values are of type string; they must be cast
        (with dedicated methods) if necessary.

        The syntax `if not xxx:` handles None and '' data retrieved from file.

    The misc section is mandatory; the page_format section is created
    if not in the config file. The page format settings are checked
    together by building a :class:`FormatCommandBuilder`.

    :param config: Opened ConfigParser object
    :type config: configparser.ConfigParser
    :return: Processed ConfigParser object
    :rtype: configparser.ConfigParser
    """
    def check_boolean(section, key, default):
        """Set the default value if not defined, exit if not a boolean"""
        value = section.get(key)
        if not value:
            section[key] = default
            return
        try:
            section.getboolean(key)
        except ValueError as exc:
            LOGGER.error("%s: expect false or true (%s)", key, value)
            raise SystemExit from exc

    ## Misc section
    misc_section = config["misc"]
    loglevel = misc_section.get("loglevel")
    if not loglevel:
        misc_section["loglevel"] = LOG_LEVEL
    log_level(misc_section["loglevel"])

    encoding = misc_section.get("encoding")
    if not encoding:
        misc_section["encoding"] = DEFAULT_ENCODING
    else:
        try:
            codecs.lookup(encoding)
        except LookupError as exc:
            LOGGER.error("encoding: unknown codec (%s)", encoding)
            raise SystemExit from exc

    check_boolean(misc_section, "automatic_linefeed", "false")
    check_boolean(misc_section, "automatic_formfeed", "true")

    ## Page format section
    if not config.has_section("page_format"):
        config.add_section("page_format")

    format_section = config["page_format"]
    for key in PAGE_FORMAT_STR_SETTINGS + PAGE_FORMAT_INT_SETTINGS:
        if not format_section.get(key):
            format_section[key] = ""

    for key in PAGE_FORMAT_INT_SETTINGS:
        value = format_section[key]
        if value and not value.strip().isdigit():
            LOGGER.error("%s: a positive integer is expected (%s)", key, value)
            raise SystemExit

    check_boolean(format_section, "use_printer_page_length", "false")

    try:
        FormatCommandBuilder(**build_format_params(config)).build()
    except ValidationError as exc:
        LOGGER.error("page_format: %s", exc)
        raise SystemExit from exc

    debug_config_file(config)
    return config


def debug_config_file(config: configparser.ConfigParser):
    """Display sections, keys and values of config file

    :param config: Opened ConfigParser object
    :type config: configparser.ConfigParser
    """
    if LOGGER.level > DEBUG:
        return
    for section in config.sections():
        LOGGER.debug("[%s]", section)

        for key, value in config[section].items():
            LOGGER.debug("%s : %s", key, value)

        LOGGER.debug("")


def build_format_params(config) -> dict:
    """Get dict of params that match the kwargs of FormatCommandBuilder object.

    Empty settings are not set (None).

    :param config: Configuration object.
    :type config: configparser.ConfigParser
    """
    format_section = config["page_format"]
    params = {
        key: value if (value := format_section.get(key)) else None
        for key in PAGE_FORMAT_STR_SETTINGS
    }
    params |= {
        key: int(value) if (value := format_section.get(key)) else None
        for key in PAGE_FORMAT_INT_SETTINGS
    }
    params["use_printer_page_length"] = format_section.getboolean(
        "use_printer_page_length", False
    )
    return params


def build_render_params(config) -> dict:
    """Get dict of params that match the kwargs of Report.to_bytes method.

    :param config: Configuration object.
    :type config: configparser.ConfigParser
    """
    misc_section = config["misc"]
    return {
        "auto_linefeed": misc_section.getboolean("automatic_linefeed", False),
        "auto_formfeed": misc_section.getboolean("automatic_formfeed", True),
        "encoding": misc_section["encoding"],
    }
