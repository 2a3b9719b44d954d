#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""FWLayout miscellaneous utilities and helper functions.

This module provides alignment arithmetic, number conversion, file helpers and
configuration loading used throughout the FWLayout library.
"""

import json
import logging
import os
import re
import textwrap
from pathlib import Path
from typing import Callable, Optional, Union

import yaml

from fwlayout.exceptions import FWLayoutAlignmentError, FWLayoutError

logger = logging.getLogger(__name__)

# Largest value representable by the 64-bit layout symbols
MAX_64BIT = (1 << 64) - 1


def align(number: int, alignment: int = 4) -> int:
    """Align number up to specified boundary.

    :param number: The number to be aligned (size or address).
    :param alignment: The boundary alignment value, typically a power of 2 (4, 8, 16).
    :return: Aligned number that is always greater than or equal to the input number.
    :raises FWLayoutAlignmentError: When alignment is non-positive or number is negative.
    """
    if alignment <= 0 or number < 0:
        raise FWLayoutAlignmentError("Wrong alignment")

    return (number + (alignment - 1)) // alignment * alignment


def align_down(number: int, alignment: int = 4) -> int:
    """Align number down to specified boundary.

    :param number: The number to be aligned (size or address).
    :param alignment: The boundary alignment value.
    :return: Aligned number that is always lower than or equal to the input number.
    :raises FWLayoutAlignmentError: When alignment is non-positive or number is negative.
    """
    if alignment <= 0 or number < 0:
        raise FWLayoutAlignmentError("Wrong alignment")

    return number // alignment * alignment


def is_aligned(number: int, alignment: int) -> bool:
    """Check whether the number is a multiple of the alignment."""
    return alignment > 0 and number % alignment == 0


def value_to_int(value: Union[bytes, bytearray, int, str], default: Optional[int] = None) -> int:
    """Convert value from multiple formats to integer.

    Supports conversion from integers, bytes, bytearrays, and string representations
    (including binary, octal, decimal, and hexadecimal formats with optional prefixes
    and C-like suffixes such as ``0x1000UL``).

    :param value: Input value to convert.
    :param default: Default value returned when conversion fails.
    :return: Converted integer value.
    :raises FWLayoutError: Unsupported input type or invalid conversion without default.
    """
    if isinstance(value, bool):
        if default is not None:
            return default
        raise FWLayoutError(f"Invalid input number type({type(value)}) with value ({value})")

    if isinstance(value, int):
        return value

    if isinstance(value, (bytes, bytearray)):
        return int.from_bytes(value, "big")

    if isinstance(value, str) and value != "":
        match = re.match(
            r"(?P<prefix>0[box])?(?P<number>[0-9a-f_]+)(?P<suffix>[ul]{0,3})$",
            value.strip().lower(),
        )
        if match:
            base = {"0b": 2, "0o": 8, "0": 10, "0x": 16, None: 10}[match.group("prefix")]
            try:
                return int(match.group("number"), base=base)
            except ValueError:
                pass

    if default is not None:
        return default
    raise FWLayoutError(f"Invalid input number type({type(value)}) with value ({value})")


def check_range(x: int, start: int = 0, end: int = MAX_64BIT) -> bool:
    """Check if the number is in range.

    :param x: Number to check.
    :param start: Lower border of range, default is 0.
    :param end: Upper border of range, default is unsigned 64-bit range.
    :return: True if fits, False otherwise.
    """
    return start <= x <= end


def format_address(value: int) -> str:
    """Format address or size as a hexadecimal string padded to 32 or 64 bits."""
    width = 8 if value <= 0xFFFF_FFFF else 16
    sign = "-" if value < 0 else ""
    return f"{sign}0x{abs(value):0{width}X}"


def size_fmt(num: Union[float, int], use_kibibyte: bool = True) -> str:
    """Format byte size into human-readable string representation.

    :param num: The byte size value to format.
    :param use_kibibyte: If True, use binary prefixes (1024-based) with 'iB' suffix,
                         if False, use decimal prefixes (1000-based) with 'B' suffix.
    :return: Formatted size string with value and unit (e.g., "1.5 kiB", "1024 B").
    """
    base, suffix = [(1000.0, "B"), (1024.0, "iB")][use_kibibyte]
    i = "B"
    for i in ["B"] + [i + suffix for i in list("kMGTP")]:
        if num < base:
            break
        num /= base

    return f"{int(num)} {i}" if i == "B" else f"{num:3.1f} {i}"


def get_abs_path(file_path: str, base_dir: Optional[str] = None) -> str:
    """Convert relative or absolute file path to normalized absolute path.

    :param file_path: File path to be converted to absolute path.
    :param base_dir: Base directory to create absolute path, system CWD when not specified.
    :return: Absolute file path with normalized separators.
    """
    if os.path.isabs(file_path):
        return file_path.replace("\\", "/")

    return os.path.abspath(os.path.join(base_dir or os.getcwd(), file_path)).replace("\\", "/")


def _find_path(
    path: str,
    check_func: Callable[[str], bool],
    use_cwd: bool = True,
    search_paths: Optional[list[str]] = None,
    raise_exc: bool = True,
) -> str:
    """Find and return the full path to a file or directory.

    Search paths take precedence over current working directory when both are specified.

    :param path: File name, part of file path or full path to search for.
    :param check_func: Function to validate if the found path exists and meets criteria.
    :param use_cwd: Try current working directory to find the file, defaults to True.
    :param search_paths: List of paths where to search for the file, defaults to None.
    :param raise_exc: Raise exception if file is not found, defaults to True.
    :return: Full absolute path or empty string if not found and raise_exc is False.
    :raises FWLayoutError: File not found in any of the searched locations.
    """
    path = path.replace("\\", "/")

    if os.path.isabs(path):
        if not check_func(path):
            if raise_exc:
                raise FWLayoutError(f"Path '{path}' not found")
            return ""
        return path
    if search_paths:
        for dir_candidate in search_paths:
            if not dir_candidate:
                continue
            path_candidate = get_abs_path(path, base_dir=dir_candidate.replace("\\", "/"))
            if check_func(path_candidate):
                return path_candidate
    if use_cwd and check_func(path):
        return get_abs_path(path)
    searched_in: list[str] = []
    if use_cwd:
        searched_in.append(os.path.abspath(os.curdir))
    if search_paths:
        searched_in.extend(filter(None, search_paths))
    searched_in = [s.replace("\\", "/") for s in searched_in]
    err_str = f"Path '{path}' not found, Searched in: {', '.join(searched_in)}"
    if not raise_exc:
        logger.debug(err_str)
        return ""
    raise FWLayoutError(err_str)


def find_file(
    file_path: str,
    use_cwd: bool = True,
    search_paths: Optional[list[str]] = None,
    raise_exc: bool = True,
) -> str:
    """Find file in filesystem using the current directory and optional search paths.

    :param file_path: File name, part of file path or full path to search for.
    :param use_cwd: Try current working directory to find the file, defaults to True.
    :param search_paths: List of paths where to search for the file, defaults to None.
    :param raise_exc: Raise exception if file is not found, defaults to True.
    :return: Full absolute path to the found file.
    :raises FWLayoutError: File not found in any of the search locations.
    """
    return _find_path(
        path=file_path,
        check_func=os.path.isfile,
        use_cwd=use_cwd,
        search_paths=search_paths,
        raise_exc=raise_exc,
    )


def load_text(path: str, search_paths: Optional[list[str]] = None) -> str:
    """Load text file content.

    :param path: Path to the text file.
    :param search_paths: List of paths where to search for the file, defaults to None.
    :return: Content of the text file as string.
    """
    with open(find_file(path, search_paths=search_paths), "r", encoding="utf-8") as f:
        return f.read()


def write_file(data: Union[str, bytes], path: str, mode: str = "w", encoding: str = "utf-8") -> int:
    """Write data into a file, creating the parent directories when needed.

    :param data: Data to write.
    :param path: Path to the output file.
    :param mode: Writing mode, 'w' for text, 'wb' for binary data.
    :param encoding: Encoding of written text, defaults to 'utf-8'.
    :return: Number of written elements.
    """
    path = path.replace("\\", "/")
    folder = os.path.dirname(path)
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)

    with open(path, mode, encoding=None if "b" in mode else encoding) as f:
        return f.write(data)


def load_configuration(path: str, search_paths: Optional[list[str]] = None) -> dict:
    """Load configuration from YAML or JSON file.

    The content is parsed as JSON first, YAML is the fallback.

    :param path: Path to configuration file (relative or absolute).
    :param search_paths: List of paths where to search for the file, defaults to None.
    :raises FWLayoutError: When file cannot be loaded, parsed, or contains invalid format.
    :return: Content of configuration as dictionary.
    """
    try:
        config = load_text(path, search_paths=search_paths)
    except (OSError, FWLayoutError) as exc:
        raise FWLayoutError(f"Can't load configuration file: {str(exc)}") from exc

    config_data: Optional[dict] = None
    try:
        config_data = json.loads(config)
    except json.JSONDecodeError:
        try:
            config_data = yaml.safe_load(config)
        except yaml.YAMLError:
            pass

    if not config_data:
        raise FWLayoutError(f"Can't parse configuration file: {path}")
    if not isinstance(config_data, dict):
        raise FWLayoutError(f"Invalid configuration file: {path}")

    return config_data


def wrap_text(text: str, max_line: int = 100) -> str:
    """Wrap text keeping existing line breaks.

    :param text: Input text to be wrapped.
    :param max_line: Maximum line length for wrapped output, defaults to 100.
    :return: Formatted text with appropriate line breaks inserted.
    """
    lines = text.splitlines()
    return "\n".join([textwrap.fill(text=line, width=max_line) for line in lines])


def get_printable_path(path: str) -> str:
    """Get printable path for file display purposes.

    :param path: Absolute or relative file path to convert.
    :return: Display-friendly file path string in POSIX format.
    """
    return Path(path).as_posix()
