#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Exceptions raised by the memory layout planner.

Every planner failure is a subclass of :class:`FWLayoutPlanError`, messages name
the offending field together with the computed values.
"""

from typing import Any, Optional

from fwlayout.exceptions import FWLayoutError, FWLayoutOverlapError, FWLayoutValueError
from fwlayout.utils.misc import format_address


class FWLayoutPlanError(FWLayoutError):
    """Base exception of the layout planner pipeline."""

    fmt = "FWLayout Plan: {description}"


class InvalidModeError(FWLayoutPlanError, FWLayoutValueError):
    """The layout mode is not one of the known modes."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Unknown layout mode: {value!r}")


class MissingParameterError(FWLayoutPlanError, FWLayoutValueError):
    """A parameter required by the selected mode has not been supplied."""

    def __init__(self, name: str) -> None:
        """Initialize the exception.

        :param name: Name of the missing configuration field.
        """
        self.name = name
        super().__init__(f"Missing required parameter: {name}")


class InvalidParameterError(FWLayoutPlanError, FWLayoutValueError):
    """A supplied parameter is not usable as an address or size."""

    def __init__(self, name: str, value: Any, reason: Optional[str] = None) -> None:
        self.name = name
        self.value = value
        msg = f"Invalid value of parameter {name}: {value!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class RegionOverlapError(FWLayoutPlanError, FWLayoutOverlapError):
    """Two memory regions of the layout share addresses."""

    def __init__(self, first: str, second: str) -> None:
        self.first = first
        self.second = second
        super().__init__(f"Memory region {first} overlaps memory region {second}")


class StackTooLargeError(FWLayoutPlanError, FWLayoutValueError):
    """The requested stack does not leave room in its hosting region."""

    def __init__(self, stack_size: int, region_name: str, region_size: int) -> None:
        """Initialize the exception.

        :param stack_size: Requested stack size.
        :param region_name: Name of the region that hosts the stack.
        :param region_size: Size of the hosting region.
        """
        self.stack_size = stack_size
        self.region_name = region_name
        self.region_size = region_size
        super().__init__(
            f"Stack size {format_address(stack_size)} must be smaller than "
            f"{region_name} size {format_address(region_size)}"
        )


class StackDoesNotFitError(FWLayoutPlanError, FWLayoutValueError):
    """Stack alignment left no usable stack."""

    def __init__(self, stack_size: int, aligned_base: int, aligned_size: int) -> None:
        self.stack_size = stack_size
        self.aligned_base = aligned_base
        self.aligned_size = aligned_size
        super().__init__(
            f"Stack of size {format_address(stack_size)} does not fit after alignment: "
            f"base {format_address(aligned_base)}, size {aligned_size:#x}"
        )


class SectionOverflowError(FWLayoutPlanError, FWLayoutValueError):
    """The used extent of an image section exceeds its region."""

    def __init__(self, section: str, region_name: str, overflow: int) -> None:
        self.section = section
        self.region_name = region_name
        self.overflow = overflow
        super().__init__(
            f"Section {section} overflows region {region_name} by {format_address(overflow)} bytes"
        )


class HeapRegionEmptyError(FWLayoutPlanError):
    """No space remains for the heap between the end of bss and the stack.

    The complete symbol table is available in :attr:`symbols`.
    """

    def __init__(self, heap_start: int, heap_end: int, symbols: dict[str, int]) -> None:
        self.heap_start = heap_start
        self.heap_end = heap_end
        self.symbols = symbols
        super().__init__(
            f"Heap region is empty: start {format_address(heap_start)}, "
            f"end {format_address(heap_end)}"
        )
