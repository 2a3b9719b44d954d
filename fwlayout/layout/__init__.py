#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Firmware memory layout planning.

The planner validates the layout configuration, computes the memory regions
and exports the layout symbols used by the linker and the firmware runtime.
"""

from fwlayout.layout.planner import LayoutPlanner, plan_layout
from fwlayout.layout.regions import compute_regions
from fwlayout.layout.symbols import SymbolTable, export_symbols
from fwlayout.layout.types import (
    LayoutConfig,
    LayoutMode,
    MemoryPlan,
    MemoryRegion,
    RegionPermission,
    SectionSizes,
    TargetConstants,
    ValidatedConfig,
)
from fwlayout.layout.validator import validate

__all__ = [
    "LayoutConfig",
    "LayoutMode",
    "LayoutPlanner",
    "MemoryPlan",
    "MemoryRegion",
    "RegionPermission",
    "SectionSizes",
    "SymbolTable",
    "TargetConstants",
    "ValidatedConfig",
    "compute_regions",
    "export_symbols",
    "plan_layout",
    "validate",
]
