#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""FWLayout exception classes.

This module defines the base hierarchy of exception classes used throughout
the FWLayout library for consistent error handling and reporting.
"""

from typing import Optional

#######################################################################
# # Firmware Layout Exceptions
#######################################################################


class FWLayoutError(Exception):
    """FWLayout Base Exception.

    All library specific exceptions inherit from this class, which provides
    the common message formatting.

    :cvar fmt: Default error message format template.
    """

    fmt = "FWLayout: {description}"

    def __init__(self, desc: Optional[str] = None) -> None:
        """Initialize the base FWLayout Exception.

        :param desc: Optional description of the exception.
        """
        super().__init__()
        self.description = desc

    def __str__(self) -> str:
        """Return string representation of the exception.

        :return: Formatted exception message as string.
        """
        return self.fmt.format(description=self.description or "Unknown Error")


class FWLayoutKeyError(FWLayoutError, KeyError):
    """FWLayout Key Error exception for missing or invalid keys."""


class FWLayoutValueError(FWLayoutError, ValueError):
    """FWLayout standard value error exception."""


class FWLayoutTypeError(FWLayoutError, TypeError):
    """FWLayout standard type error exception."""


class FWLayoutOverlapError(FWLayoutError, ValueError):
    """FWLayout exception for overlapping memory regions."""


class FWLayoutAlignmentError(FWLayoutError, ValueError):
    """FWLayout exception for data alignment errors."""
