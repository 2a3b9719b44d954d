#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Firmware memory layout planner.

The planner chains the validator, the region calculator and the symbol
exporter, and connects them with the configuration files and the
verification report.
"""

import logging
from dataclasses import fields
from typing import Any, Optional

from typing_extensions import Self

from fwlayout.exceptions import FWLayoutError
from fwlayout.layout.exceptions import FWLayoutPlanError, SectionOverflowError
from fwlayout.layout.regions import compute_regions
from fwlayout.layout.symbols import SymbolTable, export_symbols
from fwlayout.layout.types import (
    LayoutConfig,
    LayoutMode,
    MemoryPlan,
    MemoryRegion,
    SectionSizes,
    TargetConstants,
    ValidatedConfig,
)
from fwlayout.layout.validator import resolve_mode, validate
from fwlayout.utils.config import Config
from fwlayout.utils.database import get_schema_file
from fwlayout.utils.misc import format_address, is_aligned, value_to_int
from fwlayout.utils.schema_validator import CommentedConfig
from fwlayout.utils.verifier import Verifier, VerifierResult

logger = logging.getLogger(__name__)


def plan_layout(
    config: LayoutConfig,
    sections: Optional[SectionSizes] = None,
    allow_empty_heap: bool = False,
) -> tuple[MemoryPlan, SymbolTable]:
    """Run the whole planning pipeline.

    :param config: Raw layout configuration.
    :param sections: Used extents of the image sections.
    :param allow_empty_heap: Accept an image without heap.
    :return: Memory plan and symbol table.
    """
    validated = validate(config)
    plan = compute_regions(validated)
    symbols = export_symbols(plan, sections, allow_empty_heap=allow_empty_heap)
    return plan, symbols


class LayoutPlanner:
    """Firmware memory layout planner.

    :cvar FEATURE: Name of the schema file feature.
    """

    FEATURE = "fwlayout"

    def __init__(
        self,
        config: LayoutConfig,
        sections: Optional[SectionSizes] = None,
        allow_empty_heap: bool = False,
    ) -> None:
        """Initialize the planner.

        :param config: Raw layout configuration.
        :param sections: Used extents of the image sections, all empty when not specified.
        :param allow_empty_heap: Accept an image without heap.
        """
        self.config = config
        self.sections = sections or SectionSizes()
        self.allow_empty_heap = allow_empty_heap

    def __repr__(self) -> str:
        return f"LayoutPlanner({self.config.mode!r})"

    def __str__(self) -> str:
        mode = self.config.mode
        if isinstance(mode, LayoutMode):
            mode = mode.label
        return f"Firmware memory layout planner, mode: {mode}"

    @classmethod
    def get_validation_schemas(cls) -> list[dict[str, Any]]:
        """Get list of validation schemas of the planner configuration.

        :return: Validation schemas.
        """
        sch = get_schema_file(cls.FEATURE)
        return [sch["mode"], sch["regions"], sch["sections"], sch["target"]]

    @classmethod
    def get_config_template(cls) -> str:
        """Get the commented configuration template.

        :return: Template in YAML format.
        """
        return CommentedConfig(
            "Firmware memory layout configuration template",
            cls.get_validation_schemas(),
            note="Required parameters depend on the mode, mem1 is used by the dual region modes.",
        ).get_template()

    @classmethod
    def load_from_config(cls, config: Config, allow_empty_heap: bool = False) -> Self:
        """Create the planner from configuration.

        Only the value types are checked here, all the other checks are left
        to the validator.

        :param config: Planner configuration.
        :param allow_empty_heap: Accept an image without heap.
        :return: Layout planner.
        """
        config.check(cls.get_validation_schemas(), check_unknown_props=True)
        mode = config.get("mode")
        # numeric selectors may be written as strings in the configuration
        if isinstance(mode, str) and mode.strip().isdigit():
            mode = value_to_int(mode)

        target_cfg = config.get_config("target", Config())
        target_args: dict[str, Any] = {}
        for target_field in fields(TargetConstants):
            if target_field.name not in target_cfg:
                continue
            if target_field.name == "aux_name":
                target_args[target_field.name] = target_cfg.get_str(target_field.name)
            else:
                target_args[target_field.name] = target_cfg.get_int(target_field.name)

        sections_cfg = config.get_config("sections", Config())
        sections = SectionSizes(
            **{
                section_field.name: sections_cfg.get_int(section_field.name, 0)
                for section_field in fields(SectionSizes)
            }
        )

        layout_config = LayoutConfig(
            mode=mode,
            mem0_base=config.get_optional_int("mem0_base"),
            mem0_size=config.get_optional_int("mem0_size"),
            mem1_base=config.get_optional_int("mem1_base"),
            mem1_size=config.get_optional_int("mem1_size"),
            stack_size=config.get_optional_int("stack_size"),
            target=TargetConstants(**target_args),
        )
        logger.debug(f"Loaded layout configuration: {layout_config}")
        return cls(layout_config, sections=sections, allow_empty_heap=allow_empty_heap)

    def get_config(self) -> Config:
        """Get the effective configuration of the planner.

        :return: Configuration with addresses and sizes in hexadecimal format.
        """
        cfg = Config()
        mode = self.config.mode
        if mode is not None:
            cfg["mode"] = mode.label if isinstance(mode, LayoutMode) else mode
        for name in ("mem0_base", "mem0_size", "mem1_base", "mem1_size", "stack_size"):
            value = getattr(self.config, name)
            if value is not None:
                cfg[name] = format_address(value)
        cfg["sections"] = {
            section_field.name: format_address(getattr(self.sections, section_field.name))
            for section_field in fields(SectionSizes)
        }
        if self.config.target != TargetConstants():
            target = self.config.target
            cfg["target"] = {
                target_field.name: (
                    getattr(target, target_field.name)
                    if target_field.name == "aux_name"
                    else format_address(getattr(target, target_field.name))
                )
                for target_field in fields(TargetConstants)
            }
        return cfg

    def validate(self) -> ValidatedConfig:
        """Validate the configuration.

        :return: Validated configuration.
        """
        return validate(self.config)

    def plan(self) -> MemoryPlan:
        """Validate the configuration and compute the memory regions.

        :return: Memory plan.
        """
        return compute_regions(self.validate())

    def export_symbols(self, plan: Optional[MemoryPlan] = None) -> SymbolTable:
        """Export the layout symbols.

        :param plan: Already computed plan, computed again when not specified.
        :return: Symbol table.
        """
        return export_symbols(
            plan or self.plan(), self.sections, allow_empty_heap=self.allow_empty_heap
        )

    def run(self) -> tuple[MemoryPlan, SymbolTable]:
        """Run the whole planning pipeline.

        :return: Memory plan and symbol table.
        """
        return plan_layout(self.config, self.sections, allow_empty_heap=self.allow_empty_heap)

    def _verify_regions(self, plan: MemoryPlan) -> Verifier:
        ret = Verifier("Regions")
        validated = self.validate()
        physical = [MemoryRegion("mem0", validated.mem0_base, validated.mem0_size)]
        if plan.mode.is_dual:
            assert validated.mem1_base is not None and validated.mem1_size is not None
            physical.append(MemoryRegion("mem1", validated.mem1_base, validated.mem1_size))
        host = physical[-1]

        for region in plan.regions:
            ret.add_record(region.name, VerifierResult.SUCCEEDED, str(region), important=False)
        ret.add_record(
            "Stack in the top of its region",
            host.origin <= plan.stack.origin
            and abs(host.end - plan.stack.end) < plan.target.stack_alignment,
            f"{plan.stack} in {host.name}",
        )
        # only an unaligned end of the hosting region lets the aligned stack pass it
        if plan.stack.end > host.end:
            ret.add_record(
                "Stack exceeds its region",
                VerifierResult.WARNING,
                f"{host.name} ends at {format_address(host.end)}, "
                f"stack ends at {format_address(plan.stack.end)}",
            )
        for region in plan.regions:
            if region.name in (plan.stack.name, plan.aux.name):
                continue
            ret.add_record(
                f"{region.name} doesn't overlap stack",
                not region.overlaps(plan.stack),
                str(region),
                important=False,
            )
        if plan.mode.is_dual:
            ret.add_record(
                "Code and data regions are disjoint",
                not plan.code.overlaps(plan.data),
                f"{plan.code.name}, {plan.data.name}",
            )
        return ret

    def _verify_stack(self, plan: MemoryPlan) -> Verifier:
        ret = Verifier("Stack")
        stack = plan.stack
        alignment = plan.target.stack_alignment
        ret.add_record(
            "Start alignment", is_aligned(stack.origin, alignment), format_address(stack.origin)
        )
        ret.add_record("Size alignment", is_aligned(stack.length, alignment), hex(stack.length))
        if stack.length != self.config.stack_size:
            ret.add_record(
                "Size changed by alignment",
                VerifierResult.WARNING,
                f"{self.config.stack_size:#x} -> {stack.length:#x}",
            )
        privileged = plan.target.privileged_stack_size
        if privileged > stack.length:
            ret.add_record(
                "Privileged stack",
                VerifierResult.WARNING,
                f"{privileged:#x} exceeds the stack size {stack.length:#x}",
            )
        else:
            ret.add_record("Privileged stack", VerifierResult.SUCCEEDED, hex(privileged))
        return ret

    def _verify_symbols(self, plan: MemoryPlan) -> Verifier:
        ret = Verifier("Symbols")
        try:
            symbols = export_symbols(plan, self.sections, allow_empty_heap=True)
        except SectionOverflowError as exc:
            ret.add_record("Sections", VerifierResult.ERROR, exc.description)
            return ret
        missing = symbols.missing_symbols
        ret.add_record(
            "Required symbols", not missing, ", ".join(missing) if missing else len(symbols)
        )
        heap_size = symbols["HEAP_SIZE"]
        if heap_size <= 0:
            ret.add_record("Heap size", VerifierResult.WARNING, "Heap region is empty")
        else:
            ret.add_record("Heap size", VerifierResult.SUCCEEDED, format_address(heap_size))
        return ret

    def verify(self) -> Verifier:
        """Verify the layout configuration and the computed plan.

        :return: Verifier object with the verification report.
        """
        ret = Verifier(
            "Firmware memory layout", description="Verification of the firmware memory layout"
        )
        try:
            mode = resolve_mode(self.config.mode)
        except FWLayoutPlanError as exc:
            ret.add_record("Mode", VerifierResult.ERROR, exc.description)
        else:
            ret.add_record_enum("Mode", mode, LayoutMode)
        try:
            plan = self.plan()
        except FWLayoutPlanError as exc:
            ret.add_record("Plan", VerifierResult.ERROR, exc.description)
            return ret
        except FWLayoutError as exc:
            ret.add_record("Plan", VerifierResult.ERROR, str(exc))
            return ret
        ret.add_child(self._verify_regions(plan))
        ret.add_child(self._verify_stack(plan))
        ret.add_child(self._verify_symbols(plan))
        return ret
