#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Symbol export of the memory layout planner.

The symbol table is the contract between the planner, the linker script and
the firmware runtime. Image section sizes are optional, without them all
the sections are empty and only the heap gets the free space.
"""

import logging
from typing import Optional

import prettytable

from fwlayout.layout.exceptions import HeapRegionEmptyError, SectionOverflowError
from fwlayout.layout.types import LayoutMode, MemoryPlan, SectionSizes
from fwlayout.utils.misc import MAX_64BIT, align, format_address, size_fmt

logger = logging.getLogger(__name__)


class SymbolTable(dict):
    """Ordered mapping of the layout symbol names to their 64-bit values.

    :cvar REQUIRED_SYMBOLS: Names which every table must contain.
    """

    REQUIRED_SYMBOLS = (
        "TEXT_START",
        "TEXT_SIZE",
        "TEXT_END",
        "STACK_START",
        "STACK_SIZE",
        "STACK_END",
        "STACK_TOP",
        "STACK_PRIVILEGED_TOP",
        "DATA_LOAD_START",
        "DATA_START",
        "DATA_SIZE",
        "BSS_START",
        "BSS_SIZE",
        "BSS_END",
        "HEAP_START",
        "HEAP_END",
        "HEAP_SIZE",
    )

    @property
    def missing_symbols(self) -> list[str]:
        """Required symbols not present in the table."""
        return [name for name in self.REQUIRED_SYMBOLS if name not in self]

    def export(self) -> dict[str, str]:
        """Export the table with values formatted as hexadecimal strings."""
        return {name: format_address(value) for name, value in self.items()}

    def get_table(self) -> str:
        """Get the symbols as a printable table."""
        table = prettytable.PrettyTable(["Symbol", "Value"])
        table.align["Symbol"] = "l"
        table.align["Value"] = "r"
        for name, value in self.items():
            if name.endswith("_SIZE"):
                table.add_row([name, f"{format_address(value)} ({size_fmt(value)})"])
            else:
                table.add_row([name, format_address(value)])
        return str(table)


def _check_fit(section: str, end: int, region_name: str, region_end: int) -> None:
    if end > region_end:
        raise SectionOverflowError(section, region_name, end - region_end)


def export_symbols(
    plan: MemoryPlan, sections: Optional[SectionSizes] = None, allow_empty_heap: bool = False
) -> SymbolTable:
    """Derive the layout symbols from the memory plan.

    :param plan: Memory plan.
    :param sections: Used extents of the image sections, all empty by default.
    :param allow_empty_heap: Only log a warning when there is no space for the heap.
    :raises SectionOverflowError: A section doesn't fit its region.
    :raises HeapRegionEmptyError: No space remains for the heap.
    :return: Symbol table.
    """
    sections = sections or SectionSizes()
    target = plan.target
    code = plan.code
    data = plan.data
    aux = plan.aux
    stack = plan.stack
    alignment = target.section_alignment

    sym = SymbolTable()
    sym["TEXT_START"] = code.origin
    sym["TEXT_SIZE"] = sections.text_size
    sym["TEXT_END"] = code.origin + sections.text_size
    _check_fit(".text", sym["TEXT_END"], code.name, code.end)

    # System RAM content is stored in the load image right after the code
    sym["SYSTEM_RAM_LOAD_START"] = sym["TEXT_END"]
    sym["SYSTEM_RAM_START"] = aux.origin
    sym["SYSTEM_RAM_END"] = aux.origin + sections.system_ram_size
    _check_fit(".system_ram", sym["SYSTEM_RAM_END"], aux.name, aux.end)
    sym["RW_START"] = sym["TEXT_END"] + sections.system_ram_size

    if plan.mode == LayoutMode.SINGLE_REGION:
        data_start = align(sym["RW_START"], alignment)
    else:
        data_start = align(data.origin, alignment)
    data_load_start = align(sym["RW_START"], alignment) if plan.relocates_data else data_start
    data_size = align(sections.data_size, alignment)

    sym["DATA_LOAD_START"] = data_load_start
    sym["DATA_START"] = data_start
    sym["DATA_SIZE"] = data_size
    sym["DATA_END"] = data_start + data_size
    if plan.relocates_data:
        _check_fit(".data (load)", data_load_start + data_size, code.name, code.end)
    else:
        _check_fit(".system_ram (load)", sym["RW_START"], code.name, code.end)
    _check_fit(".data", sym["DATA_END"], data.name, data.end)

    sym["BSS_START"] = align(sym["DATA_END"], alignment)
    sym["BSS_SIZE"] = align(sections.bss_size, alignment)
    sym["BSS_END"] = sym["BSS_START"] + sym["BSS_SIZE"]
    _check_fit(".bss", sym["BSS_END"], data.name, data.end)

    sym["STACK_START"] = stack.origin
    sym["STACK_SIZE"] = stack.length
    sym["STACK_END"] = stack.end
    sym["STACK_TOP"] = stack.end
    sym["STACK_PRIVILEGED_SIZE"] = target.privileged_stack_size
    # wraps like the unsigned address arithmetic of the linker
    sym["STACK_PRIVILEGED_TOP"] = (stack.end - target.privileged_stack_size) & MAX_64BIT
    if target.privileged_stack_size > stack.length:
        logger.warning(
            f"Privileged stack of size {format_address(target.privileged_stack_size)} "
            f"exceeds the stack size {format_address(stack.length)}"
        )
    sym["RW_END"] = stack.end

    sym["HEAP_START"] = sym["BSS_END"]
    sym["HEAP_END"] = stack.origin
    sym["HEAP_SIZE"] = sym["HEAP_END"] - sym["HEAP_START"]

    logger.debug(f"Exported {len(sym)} layout symbols")
    if sym["HEAP_SIZE"] <= 0:
        if not allow_empty_heap:
            raise HeapRegionEmptyError(sym["HEAP_START"], sym["HEAP_END"], sym)
        logger.warning(
            f"Heap region is empty: start {format_address(sym['HEAP_START'])}, "
            f"end {format_address(sym['HEAP_END'])}"
        )
    return sym
