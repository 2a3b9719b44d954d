#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Rendering of the memory layout into linker script and C header fragments."""

import json
import logging
from string import Template
from typing import Any

from fwlayout import __version__
from fwlayout.exceptions import FWLayoutValueError
from fwlayout.layout.types import MemoryPlan
from fwlayout.utils.misc import format_address
from fwlayout.utils.schema_validator import CommentedConfig

logger = logging.getLogger(__name__)

GENERATED_NOTE = "Generated by fwlayout $version, do not edit"

MEMORY_TEMPLATE = Template(
    """/* $note */
/* Layout mode: $mode */

MEMORY
{
$regions
}
"""
)

HEADER_TEMPLATE = Template(
    """/* $note */
/* Layout mode: $mode */

#ifndef $guard
#define $guard

$defines

#endif /* $guard */
"""
)


def _note() -> str:
    return Template(GENERATED_NOTE).substitute(version=__version__)


def render_memory_block(plan: MemoryPlan) -> str:
    """Render the plan as the GNU ld MEMORY command.

    :param plan: Memory plan.
    :return: Linker script fragment.
    """
    width = max(len(region.name) for region in plan.regions)
    lines = [
        f"    {region.name:<{width}} ({region.permissions.attributes}) : "
        f"ORIGIN = {format_address(region.origin)}, LENGTH = {format_address(region.length)}"
        for region in plan.regions
    ]
    return MEMORY_TEMPLATE.substitute(note=_note(), mode=plan.mode.label, regions="\n".join(lines))


def render_symbol_assignments(symbols: dict[str, int]) -> str:
    """Render the symbols as linker script assignments, e.g. ``__STACK_TOP__ = 0x...;``.

    :param symbols: Symbol table.
    :return: Linker script fragment.
    """
    width = max((len(name) for name in symbols), default=0) + 4
    return "".join(
        f"{'__' + name + '__':<{width}} = {format_address(value)};\n"
        for name, value in symbols.items()
    )


def render_linker_script(plan: MemoryPlan, symbols: dict[str, int]) -> str:
    """Render the MEMORY command followed by the symbol assignments.

    :param plan: Memory plan.
    :param symbols: Symbol table.
    :return: Linker script fragment.
    """
    return render_memory_block(plan) + "\n" + render_symbol_assignments(symbols)


def render_c_header(symbols: dict[str, int], mode: str = "", guard: str = "FWLAYOUT_H") -> str:
    """Render the symbols as C preprocessor definitions.

    :param symbols: Symbol table.
    :param mode: Layout mode label put into the header comment.
    :param guard: Name of the include guard macro.
    :raises FWLayoutValueError: Negative symbol value.
    :return: C header content.
    """
    lines = []
    for name, value in symbols.items():
        if value < 0:
            raise FWLayoutValueError(f"Symbol {name} has negative value {value:#x}")
        # unsigned long is only 32 bits wide on LLP64 targets
        suffix = "UL" if value <= 0xFFFF_FFFF else "ULL"
        lines.append(f"#define FWLAYOUT_{name} {format_address(value)}{suffix}")
    return HEADER_TEMPLATE.substitute(
        note=_note(), mode=mode or "unknown", guard=guard, defines="\n".join(lines)
    )


def export_layout(plan: MemoryPlan, symbols: dict[str, int]) -> dict[str, Any]:
    """Export the plan and symbols into a plain dictionary."""
    return {
        "plan": plan.export(),
        "symbols": {name: format_address(value) for name, value in symbols.items()},
    }


def render_json(plan: MemoryPlan, symbols: dict[str, int]) -> str:
    """Render the plan and symbols as JSON document."""
    return json.dumps(export_layout(plan, symbols), indent=2) + "\n"


def render_yaml(plan: MemoryPlan, symbols: dict[str, int]) -> str:
    """Render the plan and symbols as YAML document."""
    return CommentedConfig.convert_cm_to_yaml(export_layout(plan, symbols))
