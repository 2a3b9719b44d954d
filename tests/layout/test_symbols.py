#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Layout symbol export tests.

The expected values follow the section placement of the linker script: code,
system RAM load image and data load image follow each other in the code region,
data and bss fill the data region from its base, heap takes the rest below
the stack.
"""

import logging

import pytest

from fwlayout.layout.exceptions import HeapRegionEmptyError, SectionOverflowError
from fwlayout.layout.regions import compute_regions
from fwlayout.layout.symbols import SymbolTable, export_symbols
from fwlayout.layout.types import LayoutConfig, SectionSizes
from fwlayout.layout.validator import validate


def _plan(**kwargs):
    return compute_regions(validate(LayoutConfig(**kwargs)))


SINGLE = {"mode": "single-region", "mem0_base": 0x1000, "mem0_size": 0x2000, "stack_size": 0x100}
RELOCATED = {
    "mode": "dual-region-relocated",
    "mem0_base": 0x0,
    "mem0_size": 0x4000,
    "mem1_base": 0x8000,
    "mem1_size": 0x1000,
    "stack_size": 0x40,
}
FIXED = {**RELOCATED, "mode": "dual-region-fixed"}


def test_single_region_empty_sections() -> None:
    """Test the symbols of the single region layout without sections."""
    symbols = export_symbols(_plan(**SINGLE))
    assert isinstance(symbols, SymbolTable)
    assert symbols.missing_symbols == []
    assert symbols["TEXT_START"] == 0x1000
    assert symbols["TEXT_SIZE"] == 0
    assert symbols["TEXT_END"] == 0x1000
    assert symbols["DATA_LOAD_START"] == symbols["DATA_START"] == 0x1000
    assert symbols["BSS_START"] == symbols["BSS_END"] == 0x1000
    assert symbols["STACK_START"] == 0x2F00
    assert symbols["STACK_SIZE"] == 0x100
    assert symbols["STACK_END"] == symbols["STACK_TOP"] == 0x3000
    assert symbols["STACK_PRIVILEGED_SIZE"] == 0x800
    assert symbols["STACK_PRIVILEGED_TOP"] == 0x2800
    assert symbols["HEAP_START"] == 0x1000
    assert symbols["HEAP_END"] == 0x2F00
    assert symbols["HEAP_SIZE"] == 0x1F00
    assert symbols["RW_END"] == 0x3000


def test_single_region_with_sections() -> None:
    """Test the single region symbols with sections of unaligned sizes."""
    sections = SectionSizes(text_size=0x203, system_ram_size=0x10, data_size=0x21, bss_size=0x30)
    symbols = export_symbols(_plan(**SINGLE), sections)
    assert symbols["TEXT_END"] == 0x1203
    assert symbols["SYSTEM_RAM_LOAD_START"] == 0x1203
    assert symbols["SYSTEM_RAM_START"] == 0xE6302000
    assert symbols["SYSTEM_RAM_END"] == 0xE6302010
    assert symbols["RW_START"] == 0x1213
    assert symbols["DATA_START"] == 0x1214
    assert symbols["DATA_LOAD_START"] == 0x1214
    assert symbols["DATA_SIZE"] == 0x24
    assert symbols["BSS_START"] == 0x1238
    assert symbols["BSS_SIZE"] == 0x30
    assert symbols["BSS_END"] == 0x1268
    assert symbols["HEAP_START"] == 0x1268
    assert symbols["HEAP_SIZE"] == 0x2F00 - 0x1268


@pytest.mark.parametrize("config,data_load_start", [(RELOCATED, 0x1024), (FIXED, 0x8000)])
def test_dual_region(config, data_load_start) -> None:
    """Test the data load address is tracked separately only in the relocated mode."""
    sections = SectionSizes(text_size=0x1001, system_ram_size=0x20, data_size=0x40, bss_size=0x80)
    symbols = export_symbols(_plan(**config), sections)
    assert symbols["TEXT_START"] == 0x0
    assert symbols["TEXT_END"] == 0x1001
    assert symbols["RW_START"] == 0x1021
    assert symbols["DATA_START"] == 0x8000
    assert symbols["DATA_LOAD_START"] == data_load_start
    assert symbols["BSS_START"] == 0x8040
    assert symbols["BSS_END"] == 0x80C0
    assert symbols["HEAP_START"] == 0x80C0
    assert symbols["HEAP_END"] == 0x8FC0
    assert symbols["HEAP_SIZE"] == 0xF00
    assert symbols["STACK_START"] == 0x8FC0
    assert symbols["STACK_END"] == 0x9000
    assert symbols["STACK_PRIVILEGED_TOP"] == 0x8800


def test_relocated_data_load_in_code_region() -> None:
    """Test that relocated data are loaded from mem0 and run in mem1."""
    plan = _plan(**RELOCATED)
    symbols = export_symbols(plan, SectionSizes(text_size=0x100, data_size=0x10))
    assert plan.code.origin <= symbols["DATA_LOAD_START"] < plan.code.end
    assert plan.data.origin <= symbols["DATA_START"] < plan.data.end


@pytest.mark.parametrize(
    "config,sections",
    [
        (SINGLE, SectionSizes()),
        (SINGLE, SectionSizes(text_size=0x100, data_size=0x13, bss_size=0x7)),
        (RELOCATED, SectionSizes(text_size=0x3000, data_size=0x100, bss_size=0x201)),
        (FIXED, SectionSizes(system_ram_size=0x1000, bss_size=0xF00)),
    ],
)
def test_heap_and_stack_equations(config, sections) -> None:
    """Test the derived heap and stack symbols."""
    symbols = export_symbols(_plan(**config), sections)
    assert symbols["HEAP_SIZE"] == symbols["HEAP_END"] - symbols["HEAP_START"]
    assert symbols["HEAP_START"] == symbols["BSS_END"]
    assert symbols["HEAP_END"] == symbols["STACK_START"]
    assert symbols["STACK_TOP"] == symbols["STACK_END"]
    assert symbols["STACK_PRIVILEGED_TOP"] == symbols["STACK_END"] - 0x800
    assert symbols["STACK_START"] % 8 == 0
    assert symbols["STACK_SIZE"] % 8 == 0
    assert symbols["DATA_START"] % 4 == 0
    assert symbols["BSS_START"] % 4 == 0


@pytest.mark.parametrize(
    "config,sections,section,overflow",
    [
        (SINGLE, SectionSizes(text_size=0x1F01), ".text", 0x1),
        (SINGLE, SectionSizes(system_ram_size=0x1001), ".system_ram", 0x1),
        (SINGLE, SectionSizes(text_size=0x1000, bss_size=0xF04), ".bss", 0x4),
        (RELOCATED, SectionSizes(text_size=0x3FF0, data_size=0x20), ".data (load)", 0x10),
        (FIXED, SectionSizes(text_size=0x3FF0, system_ram_size=0x20), ".system_ram (load)", 0x10),
        (FIXED, SectionSizes(data_size=0xFC4), ".data", 0x4),
        (RELOCATED, SectionSizes(data_size=0x40, bss_size=0xF84), ".bss", 0x4),
    ],
)
def test_section_overflow(config, sections, section, overflow) -> None:
    """Test that sections exceeding their regions are refused."""
    with pytest.raises(SectionOverflowError) as exc:
        export_symbols(_plan(**config), sections)
    assert exc.value.section == section
    assert exc.value.overflow == overflow


def test_heap_region_empty() -> None:
    """Test that a layout without heap raises the error carrying the symbols."""
    with pytest.raises(HeapRegionEmptyError) as exc:
        export_symbols(_plan(**FIXED), SectionSizes(bss_size=0xFC0))
    assert exc.value.heap_start == exc.value.heap_end == 0x8FC0
    assert exc.value.symbols["HEAP_SIZE"] == 0
    assert exc.value.symbols.missing_symbols == []


def test_heap_region_empty_allowed(caplog) -> None:
    """Test that the empty heap is just logged when allowed."""
    caplog.set_level(logging.WARNING)
    symbols = export_symbols(
        _plan(**SINGLE), SectionSizes(text_size=0x1F00), allow_empty_heap=True
    )
    assert symbols["HEAP_SIZE"] == 0
    assert "Heap region is empty" in caplog.text


def test_privileged_stack_warning(caplog) -> None:
    """Test the warning of a privileged sub-stack larger than the whole stack."""
    caplog.set_level(logging.WARNING)
    export_symbols(_plan(**SINGLE))
    assert "Privileged stack" in caplog.text
    caplog.clear()
    export_symbols(_plan(**{**SINGLE, "stack_size": 0x1000}))
    assert "Privileged stack" not in caplog.text


def test_privileged_stack_top_wraps_around() -> None:
    """Test that a stack ending below the privileged stack size wraps in 64-bit space."""
    symbols = export_symbols(
        _plan(mode="single-region", mem0_base=0x0, mem0_size=0x400, stack_size=0x100)
    )
    assert symbols["STACK_END"] == 0x400
    assert symbols["STACK_PRIVILEGED_TOP"] == 0xFFFF_FFFF_FFFF_FC00
    assert all(0 <= value <= 0xFFFF_FFFF_FFFF_FFFF for value in symbols.values())
    assert symbols.export()["STACK_PRIVILEGED_TOP"] == "0xFFFFFFFFFFFFFC00"


def test_export_is_deterministic() -> None:
    """Test that the same plan always gives an equal symbol table."""
    sections = SectionSizes(text_size=0x100, data_size=0x10)
    assert export_symbols(_plan(**RELOCATED), sections) == export_symbols(
        _plan(**RELOCATED), sections
    )


def test_symbol_table_output() -> None:
    """Test the hexadecimal export and the printable table of symbols."""
    symbols = export_symbols(_plan(**SINGLE))
    exported = symbols.export()
    assert list(exported.keys()) == list(symbols.keys())
    assert exported["STACK_TOP"] == "0x00003000"
    assert exported["SYSTEM_RAM_START"] == "0xE6302000"
    table = symbols.get_table()
    assert "HEAP_SIZE" in table
    assert "0x00001F00 (7.8 kiB)" in table
