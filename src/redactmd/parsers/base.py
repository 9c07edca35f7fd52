#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/parsers/base.py
"""Base classes for document parsers.

This module defines the abstract base class for parsers that turn markdown
input into the redactmd AST.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from redactmd.ast import Document
from redactmd.exceptions import FileError, InvalidOptionsError, ParsingError
from redactmd.options.base import BaseParserOptions

logger = logging.getLogger(__name__)

ParserInput = Union[str, Path, IO[bytes], IO[str], bytes]


class BaseParser(ABC):
    """Abstract base class for markdown parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Parsing options

    Notes
    -----
    The parse() method accepts:

    - str: markdown content (never interpreted as a file path)
    - Path: file to read
    - IO[bytes] or IO[str]: file-like object
    - bytes: UTF-8 encoded markdown

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options: BaseParserOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Parameters
        ----------
        options : BaseParserOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        parser_name : str
            Name of the parser (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: ParserInput) -> Document:
        """Parse the input document into an AST.

        Parameters
        ----------
        input_data : str, Path, IO, or bytes
            Markdown input

        Returns
        -------
        Document
            AST Document node

        """
        ...

    @staticmethod
    def _load_text_content(input_data: ParserInput) -> str:
        """Load markdown text from the supported input types.

        Raises
        ------
        FileError
            If a Path cannot be read
        ParsingError
            If bytes are not valid UTF-8

        """
        if isinstance(input_data, str):
            return input_data

        if isinstance(input_data, Path):
            try:
                raw = input_data.read_bytes()
            except OSError as e:
                raise FileError(f"Could not read {input_data}: {e}", file_path=str(input_data), original_error=e) from e
            return BaseParser._decode(raw)

        if isinstance(input_data, bytes):
            return BaseParser._decode(input_data)

        if hasattr(input_data, "seek") and input_data.seekable():
            input_data.seek(0)
        data = input_data.read()
        if isinstance(data, bytes):
            return BaseParser._decode(data)
        return data

    @staticmethod
    def _decode(raw: bytes) -> str:
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParsingError("Markdown input is not valid UTF-8", parsing_stage="decoding", original_error=e) from e
