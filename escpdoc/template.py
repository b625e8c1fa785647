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
"""Templates: placeholders scanning, filling & JSON templates

Placeholders are written ``${name}`` inside the lines of a template.
The scanner is tolerant: unterminated or empty delimiters are kept as
literal text; the validation of the names is the job of the evaluator
that resolves them.
"""
# Standard imports
from functools import lru_cache
from pathlib import Path
import json

# Custom imports
from lark import Lark, Transformer, Token
from lark.exceptions import LarkError

# Local imports
from escpdoc.commons import LF, logger
from escpdoc.errors import ValidationError

LOGGER = logger()

template_grammar = r"""
    start: (PLACEHOLDER | TEXT)*

    # Priority over the lone "$" of TEXT
    PLACEHOLDER.2: /\$\{[^${}\n]+\}/
    TEXT: /[^$]+/ | "$"
"""

# Keys of the "pageFormat" object of JSON templates and their
# FormatCommandBuilder equivalents
PAGE_FORMAT_KEYS = {
    "lineSpacing": "line_spacing",
    "characterPitch": "character_pitch",
    "pageLength": "page_length",
    "usePrinterPageLength": "use_printer_page_length",
    "pageWidth": "page_width",
    "leftMargin": "left_margin",
    "rightMargin": "right_margin",
    "bottomMargin": "bottom_margin",
    "typeface": "typeface",
}


@lru_cache
def template_parser() -> Lark:
    """Get the (cached) parser of template lines"""
    return Lark(template_grammar, parser="lalr")


def placeholder_name(token: Token) -> str:
    """Get the name enclosed in a PLACEHOLDER token: ``${ name }`` => ``name``"""
    return token.value[2:-1].strip()


def scan(text: str):
    """Split the given text into TEXT & PLACEHOLDER tokens

    :return: Tokens in the order of the text.
    :rtype: list[lark.Token]
    """
    try:
        tree = template_parser().parse(text)
    except LarkError as exc:  # pragma: no cover
        raise ValidationError(f"Template text can't be scanned ({text!r})") from exc
    return tree.children


def find_placeholders(text: str) -> list[str]:
    """Get the names of the placeholders used in the given text

    :return: Distinct names, in the order of their first occurrence.
    """
    names = dict.fromkeys(
        name
        for token in scan(text)
        if token.type == "PLACEHOLDER" and (name := placeholder_name(token))
    )
    return list(names)


def normalize(lines) -> str:
    """Join the lines of a template, each one followed by a line feed

    :type lines: Iterable[str]
    """
    return "".join(line + LF for line in lines)


class PlaceholderFiller(Transformer):
    """Replace placeholders by their resolved values

    Placeholders without value are left untouched.
    """

    def __init__(self, values):
        super().__init__()
        self.values = values

    def PLACEHOLDER(self, token):
        name = placeholder_name(token)
        if name not in self.values:
            LOGGER.debug("No value for placeholder <%s>", name)
            return token.value
        return str(self.values[name])

    def TEXT(self, token):
        return token.value

    def start(self, children):
        return "".join(children)


def fill(text: str, values) -> str:
    """Substitute the resolved values to the placeholders of the given text

    :param text: Template text.
    :param values: Mapping of placeholder names to their resolved values.
    :type values: dict
    """
    return PlaceholderFiller(values).transform(template_parser().parse(text))


class JsonTemplate:
    """Template described by a JSON document

    Expected structure::

        {
            "pageFormat": {"lineSpacing": "1/8", "pageLength": 20, ...},
            "placeholder": ["id", "nickname"],
            "template": {
                "header": ["..."],
                "detail": ["Your id is ${id}, Mr. ${nickname}."],
                "footer": ["Page ${page_number}"]
            }
        }

    "template" can also be a plain list of lines (detail only);
    "pageFormat" and "placeholder" are optional.
    """

    def __init__(self, json_text: str):
        self.original_text = json_text
        self.parsed_text = None
        self.header = ()
        self.detail = ()
        self.footer = ()
        self.page_format = {}
        self.placeholders = []

    @classmethod
    def from_file(cls, filepath: Path | str):
        """Load the template from a JSON file"""
        return cls(Path(filepath).read_text(encoding="utf-8"))

    def parse(self):
        """Parse the JSON document and prepare the template

        :return: The current template.
        :rtype: JsonTemplate
        :raise ValidationError: If the document is malformed.
        """
        try:
            data = json.loads(self.original_text)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Malformed JSON template: {exc}") from exc

        if not isinstance(data, dict) or "template" not in data:
            raise ValidationError("JSON template: a 'template' key is expected")

        template = data["template"]
        if isinstance(template, list):
            template = {"detail": template}
        elif not isinstance(template, dict):
            raise ValidationError("JSON template: 'template' must be a list or an object")

        unexpected_keys = set(template) - {"header", "detail", "footer"}
        if unexpected_keys:
            raise ValidationError(f"JSON template: unexpected sections {sorted(unexpected_keys)}")

        self.header = self.get_lines(template, "header")
        self.detail = self.get_lines(template, "detail")
        self.footer = self.get_lines(template, "footer")
        self.parsed_text = normalize(self.detail)

        page_format = data.get("pageFormat", {})
        if not isinstance(page_format, dict):
            raise ValidationError("JSON template: 'pageFormat' must be an object")
        unexpected_keys = set(page_format) - set(PAGE_FORMAT_KEYS)
        if unexpected_keys:
            raise ValidationError(f"JSON template: unexpected page format {sorted(unexpected_keys)}")
        self.page_format = {PAGE_FORMAT_KEYS[key]: value for key, value in page_format.items()}

        if "placeholder" in data:
            self.placeholders = list(dict.fromkeys(self.get_lines(data, "placeholder")))
        else:
            self.placeholders = self.find_placeholders()

        LOGGER.debug(
            "Template parsed: %d header, %d detail, %d footer lines; placeholders: %s",
            len(self.header), len(self.detail), len(self.footer), self.placeholders,
        )
        return self

    @staticmethod
    def get_lines(template: dict, section: str) -> tuple[str, ...]:
        """Get the lines of a section of the template

        :raise ValidationError: If the section is not a list of strings.
        """
        lines = template.get(section, [])
        if not isinstance(lines, list) or not all(isinstance(line, str) for line in lines):
            raise ValidationError(f"JSON template: '{section}' must be a list of strings")
        return tuple(lines)

    def find_placeholders(self) -> list[str]:
        """Get the placeholders used in all the sections of the template"""
        return find_placeholders(normalize(self.header + self.detail + self.footer))

    def find_placeholder_in(self, text: str) -> list[str]:
        """Get the placeholders used in the given text; see :func:`find_placeholders`"""
        return find_placeholders(text)
