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
"""EscpDoc entry point"""

# Standard imports
import argparse
from pathlib import Path
import json
import sys
import shutil

# Local imports
from escpdoc import __version__
from escpdoc.config_parser import load_config, build_format_params, build_render_params
from escpdoc.errors import ESCPDocError
from escpdoc.format_commands import FormatCommandBuilder
from escpdoc.report import Report
from escpdoc.template import JsonTemplate
import escpdoc.commons as cm
from escpdoc.commons import CONFIG_FILES, USER_CONFIG_FILE, EMBEDDED_CONFIG_FILE

LOGGER = cm.logger()


def choose_config_file(config_file: [Path | None]) -> Path:
    """Get an existing configuration file

    Search the config file in the current directory, then in `~/.local/share/escpdoc`.
    If none has been found: create a config file from the embedded one, in the
    user configuration folder and use it.
    The filename is defined in :meth:`escpdoc.commons.CONFIG_FILE`.

    :param config_file: Configuration file path from the cli. Can be None if the
        argument is not used.
    :return: A Path for a valid configuration file, ready to be loaded in the
        ConfigParser.
    """
    if isinstance(config_file, Path):
        # Config file from command line
        if not config_file.exists():
            LOGGER.critical("Configuration file <%s> not found!", config_file)
            raise SystemExit
        return config_file

    # Search the config file in the current directory, then in ~/.local/share/
    g = [path for path in CONFIG_FILES if path.exists()]
    if not g:
        # If none has been found: create the config file from the embedded one
        LOGGER.info("Initialize new default config at <%s>", USER_CONFIG_FILE)
        USER_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy(EMBEDDED_CONFIG_FILE, USER_CONFIG_FILE)
        return USER_CONFIG_FILE
    else:
        # Use the first file found
        config_file = g[0]
        LOGGER.info("Use config at <%s>", config_file)
        return config_file


def load_values(data_file) -> dict:
    """Get the resolved values of the placeholders from a JSON file

    :param data_file: Opened JSON file, or None if no values are given.
    :type data_file: io.TextIOWrapper | None
    """
    if data_file is None:
        return {}
    try:
        values = json.load(data_file)
    except json.JSONDecodeError as exc:
        LOGGER.critical("Data file is not a valid JSON file: %s", exc)
        raise SystemExit from exc
    if not isinstance(values, dict):
        LOGGER.critical("Data file: a JSON object is expected!")
        raise SystemExit
    return values


def escpdoc_entry_point(**kwargs):
    """The main routine."""
    template_content = kwargs["template"].read()
    if not template_content:
        LOGGER.critical("Template file is empty!")
        raise SystemExit

    config = load_config(config_file=kwargs["config"])

    # Command line settings take precedence over the configuration
    render_params = build_render_params(config)
    render_params.update(
        (key, kwargs[key]) for key in ("auto_linefeed", "auto_formfeed") if key in kwargs
    )
    format_params = build_format_params(config)

    LOGGER.info("EscpDoc start; %s", __version__)
    try:
        template = JsonTemplate(template_content).parse()
        # Page format of the template takes precedence over the configuration
        format_params.update(
            (key, value) for key, value in template.page_format.items() if value is not None
        )
        report = Report(
            detail=template.detail,
            header=template.header,
            footer=template.footer,
            page_format=FormatCommandBuilder(**format_params),
        )
        payload = report.to_bytes(load_values(kwargs.get("data")), **render_params)
    except ESCPDocError as exc:
        LOGGER.critical("%s", exc)
        raise SystemExit from exc

    output = kwargs["output"]
    if isinstance(output, (str, Path)):
        Path(output).write_bytes(payload)
    else:
        # Support of argparse file descriptor
        output.buffer.write(payload)
        output.flush()
    LOGGER.info("%d bytes written", len(payload))


def args_to_params(args):  # pragma: no cover
    """Return argparse namespace as a dict {variable name: value}"""
    return dict(vars(args).items())


def main():  # pragma: no cover
    """Entry point and argument parser"""
    parser = argparse.ArgumentParser(
        prog="escpdoc",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        "template",
        help="JSON template file. - to read from stdin.",
        type=argparse.FileType("r"),
        default=sys.stdin
    )

    parser.add_argument(
        "-d",
        "--data",
        nargs="?",
        help="JSON file with the values of the placeholders. (default: no values)",
        default=argparse.SUPPRESS,  # Absent by default (handled later)
        type=argparse.FileType("r"),
    )

    parser.add_argument(
        "--automatic_linefeed",
        help="Printer adds LF after CR; lines are separated by CR only. "
            "(default: from the config file)",
        default=argparse.SUPPRESS,  # Absent by default (handled later)
        action=argparse.BooleanOptionalAction,
        dest="auto_linefeed",
    )

    parser.add_argument(
        "--automatic_formfeed",
        help="Add CR FF at the end of each page. (default: from the config file)",
        default=argparse.SUPPRESS,  # Absent by default (handled later)
        action=argparse.BooleanOptionalAction,
        dest="auto_formfeed",
    )

    parser.add_argument(
        "-o",
        "--output",
        help="ESC/P output file. - to write on stdout.",
        type=argparse.FileType("w"),
        default="output.prn",
    )

    parser.add_argument(
        "-c",
        "--config",
        nargs="?",
        help="Configuration file to use. "
            "(default: ./escpdoc.conf, ~/.local/share/escpdoc/escpdoc.conf)",
        default=argparse.SUPPRESS,  # Absent by default (handled later)
        type=Path,
    )

    parser.add_argument(
        "-v", "--version", action="version", version=__version__
    )

    # Get program args and launch associated command
    args = parser.parse_args()

    params = args_to_params(args)

    # Handle configuration file
    params["config"] = choose_config_file(params.get("config"))

    # Do magic
    escpdoc_entry_point(**params)


if __name__ == "__main__":  # pragma: no cover
    main()
