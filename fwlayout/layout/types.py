#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Data types of the memory layout planner.

The planner runs a one-way pipeline: raw :class:`LayoutConfig` is validated into
:class:`ValidatedConfig`, turned into a :class:`MemoryPlan` and finally into the
symbol table. All the types here are immutable values.
"""

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any, Optional, Union

import prettytable

from fwlayout.utils.fw_enum import FwEnum
from fwlayout.utils.misc import format_address


class LayoutMode(FwEnum):
    """Memory layout modes.

    The tags match the numeric mode selectors used by firmware build files.
    """

    SINGLE_REGION = (0, "single-region", "Code, data, bss, heap and stack in one region")
    DUAL_REGION_RELOCATED = (
        1,
        "dual-region-relocated",
        "Code in mem0, data in mem1 loaded from mem0 at startup",
    )
    DUAL_REGION_FIXED = (2, "dual-region-fixed", "Code in mem0, data in mem1 in place")

    @property
    def is_dual(self) -> bool:
        """True for the modes using two physical regions."""
        return self.tag != LayoutMode.SINGLE_REGION.tag


class RegionPermission(IntFlag):
    """Access attributes of a memory region."""

    READ = 4
    WRITE = 2
    EXECUTE = 1

    @property
    def attributes(self) -> str:
        """Attribute string in the linker script format, e.g. ``rwx``."""
        ret = ""
        for flag, char in (
            (RegionPermission.READ, "r"),
            (RegionPermission.WRITE, "w"),
            (RegionPermission.EXECUTE, "x"),
        ):
            if self & flag:
                ret += char
        return ret


RWX = RegionPermission.READ | RegionPermission.WRITE | RegionPermission.EXECUTE
RX = RegionPermission.READ | RegionPermission.EXECUTE
RW = RegionPermission.READ | RegionPermission.WRITE


@dataclass(frozen=True)
class TargetConstants:
    """Hardware constants of the target platform."""

    stack_alignment: int = 8
    section_alignment: int = 4
    aux_name: str = "sram"
    aux_base: int = 0xE6302000
    aux_size: int = 0x1000
    privileged_stack_size: int = 0x800


@dataclass(frozen=True)
class LayoutConfig:
    """Raw planner input.

    Every field is optional, the validator reports the ones missing for the
    selected mode.
    """

    mode: Optional[Union[LayoutMode, int, str]] = None
    mem0_base: Optional[int] = None
    mem0_size: Optional[int] = None
    mem1_base: Optional[int] = None
    mem1_size: Optional[int] = None
    stack_size: Optional[int] = None
    target: TargetConstants = field(default_factory=TargetConstants)


@dataclass(frozen=True)
class ValidatedConfig:
    """Planner input that passed validation.

    ``mem1_base`` and ``mem1_size`` are guaranteed only for the dual modes.
    """

    mode: LayoutMode
    mem0_base: int
    mem0_size: int
    stack_size: int
    mem1_base: Optional[int] = None
    mem1_size: Optional[int] = None
    target: TargetConstants = field(default_factory=TargetConstants)

    @property
    def data_region_size(self) -> int:
        """Size of the physical region hosting data and stack."""
        if self.mode.is_dual:
            assert self.mem1_size is not None
            return self.mem1_size
        return self.mem0_size


@dataclass(frozen=True)
class SectionSizes:
    """Used extents of the image sections, all of them empty by default."""

    text_size: int = 0
    system_ram_size: int = 0
    data_size: int = 0
    bss_size: int = 0


@dataclass(frozen=True)
class MemoryRegion:
    """Named address range with access attributes."""

    name: str
    origin: int
    length: int
    permissions: RegionPermission = RWX

    @property
    def end(self) -> int:
        """First address behind the region."""
        return self.origin + self.length

    def contains(self, other: "MemoryRegion") -> bool:
        """Check whether the other region lies completely inside this one."""
        return self.origin <= other.origin and other.end <= self.end

    def overlaps(self, other: "MemoryRegion") -> bool:
        """Check whether the regions share at least one address."""
        return self.origin < other.end and other.origin < self.end

    def __str__(self) -> str:
        return (
            f"{self.name} ({self.permissions.attributes}): ORIGIN = {format_address(self.origin)}, "
            f"LENGTH = {format_address(self.length)}"
        )

    def export(self) -> dict[str, Any]:
        """Export the region into a plain dictionary."""
        return {
            "name": self.name,
            "origin": format_address(self.origin),
            "length": format_address(self.length),
            "attributes": self.permissions.attributes,
        }


@dataclass(frozen=True)
class MemoryPlan:
    """Result of the region calculation.

    Regions are ordered ``mem0``, optional ``mem1``, ``stack`` and the auxiliary
    region. The stack always sits at the top of its nominal physical region.
    """

    mode: LayoutMode
    regions: tuple[MemoryRegion, ...]
    code_region: str
    data_region: str
    data_load_region: str
    target: TargetConstants = field(default_factory=TargetConstants)

    def get_region(self, name: str) -> MemoryRegion:
        """Get region by its name.

        :param name: Name of the region.
        :raises KeyError: No region with such name.
        :return: Memory region.
        """
        for region in self.regions:
            if region.name == name:
                return region
        raise KeyError(name)

    @property
    def relocates_data(self) -> bool:
        """True when the data are copied from the load image at startup."""
        return self.data_load_region != self.data_region

    @property
    def stack(self) -> MemoryRegion:
        """Stack region."""
        return self.get_region("stack")

    @property
    def aux(self) -> MemoryRegion:
        """Auxiliary system RAM region."""
        return self.get_region(self.target.aux_name)

    @property
    def code(self) -> MemoryRegion:
        """Region holding the code."""
        return self.get_region(self.code_region)

    @property
    def data(self) -> MemoryRegion:
        """Region holding the run-time data."""
        return self.get_region(self.data_region)

    def export(self) -> dict[str, Any]:
        """Export the plan into a plain dictionary."""
        return {
            "mode": self.mode.label,
            "code_region": self.code_region,
            "data_region": self.data_region,
            "data_load_region": self.data_load_region,
            "regions": [region.export() for region in self.regions],
        }

    def get_table(self) -> str:
        """Get the regions as a printable table."""
        table = prettytable.PrettyTable(["Region", "Origin", "Length", "End", "Attributes"])
        table.align = "r"
        table.align["Region"] = "l"
        for region in self.regions:
            table.add_row(
                [
                    region.name,
                    format_address(region.origin),
                    format_address(region.length),
                    format_address(region.end),
                    region.permissions.attributes,
                ]
            )
        return str(table)
