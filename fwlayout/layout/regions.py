#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Region calculation of the memory layout planner.

The stack is always carved from the top of the region hosting the data; the
rest of that region stays for code (single region) or data, bss and heap
(dual region modes).
"""

import logging
from typing import Callable

from fwlayout.layout.exceptions import RegionOverlapError, StackDoesNotFitError
from fwlayout.layout.types import (
    RW,
    RWX,
    RX,
    LayoutMode,
    MemoryPlan,
    MemoryRegion,
    ValidatedConfig,
)
from fwlayout.utils.misc import align, align_down

logger = logging.getLogger(__name__)


def place_stack(region_end: int, stack_size: int, alignment: int = 8) -> MemoryRegion:
    """Place the stack at the top of its hosting region.

    The base is rounded up and the end is rounded down to the alignment, so the
    aligned stack may get smaller than requested. When the region end itself is
    not aligned, the aligned stack may pass that end by less than the alignment.

    :param region_end: First address behind the hosting region.
    :param stack_size: Requested stack size.
    :param alignment: Stack alignment.
    :raises StackDoesNotFitError: Nothing is left of the stack after the alignment.
    :return: Stack region.
    """
    unaligned_base = region_end - stack_size
    aligned_base = align(unaligned_base, alignment)
    aligned_size = align_down(aligned_base + stack_size, alignment) - aligned_base
    if aligned_size <= 0:
        raise StackDoesNotFitError(stack_size, aligned_base, aligned_size)
    if aligned_size != stack_size:
        logger.debug(f"Stack size changed by alignment from {stack_size:#x} to {aligned_size:#x}")
    return MemoryRegion("stack", aligned_base, aligned_size, RW)


def _aux_region(config: ValidatedConfig) -> MemoryRegion:
    target = config.target
    return MemoryRegion(target.aux_name, target.aux_base, target.aux_size, RWX)


def compute_single_region(config: ValidatedConfig) -> MemoryPlan:
    """Compute the plan with everything placed in ``mem0``.

    :param config: Validated configuration.
    :return: Memory plan.
    """
    mem0_end = config.mem0_base + config.mem0_size
    stack = place_stack(mem0_end, config.stack_size, config.target.stack_alignment)
    mem0 = MemoryRegion("mem0", config.mem0_base, config.mem0_size - config.stack_size, RWX)
    return MemoryPlan(
        mode=config.mode,
        regions=(mem0, stack, _aux_region(config)),
        code_region="mem0",
        data_region="mem0",
        data_load_region="mem0",
        target=config.target,
    )


def _compute_dual_region(config: ValidatedConfig, data_load_region: str) -> MemoryPlan:
    assert config.mem1_base is not None and config.mem1_size is not None
    mem1_end = config.mem1_base + config.mem1_size
    stack = place_stack(mem1_end, config.stack_size, config.target.stack_alignment)
    mem0 = MemoryRegion("mem0", config.mem0_base, config.mem0_size, RX)
    mem1 = MemoryRegion("mem1", config.mem1_base, config.mem1_size - config.stack_size, RWX)
    return MemoryPlan(
        mode=config.mode,
        regions=(mem0, mem1, stack, _aux_region(config)),
        code_region="mem0",
        data_region="mem1",
        data_load_region=data_load_region,
        target=config.target,
    )


def compute_dual_region_relocated(config: ValidatedConfig) -> MemoryPlan:
    """Compute the plan with code in ``mem0`` and data in ``mem1``.

    The initialized data are stored in the load image in ``mem0`` and copied
    into ``mem1`` at startup.

    :param config: Validated configuration.
    :return: Memory plan.
    """
    return _compute_dual_region(config, data_load_region="mem0")


def compute_dual_region_fixed(config: ValidatedConfig) -> MemoryPlan:
    """Compute the plan with code in ``mem0`` and data loaded directly into ``mem1``.

    :param config: Validated configuration.
    :return: Memory plan.
    """
    return _compute_dual_region(config, data_load_region="mem1")


REGION_CALCULATORS: dict[LayoutMode, Callable[[ValidatedConfig], MemoryPlan]] = {
    LayoutMode.SINGLE_REGION: compute_single_region,
    LayoutMode.DUAL_REGION_RELOCATED: compute_dual_region_relocated,
    LayoutMode.DUAL_REGION_FIXED: compute_dual_region_fixed,
}


def compute_regions(config: ValidatedConfig) -> MemoryPlan:
    """Compute the memory plan for the validated configuration.

    :param config: Validated configuration.
    :raises StackDoesNotFitError: Stack alignment left no usable stack.
    :raises RegionOverlapError: The auxiliary region overlaps a planned region.
    :return: Memory plan.
    """
    plan = REGION_CALCULATORS[config.mode](config)
    for region in plan.regions:
        if region.name != plan.aux.name and region.overlaps(plan.aux):
            raise RegionOverlapError(region.name, plan.aux.name)
    for region in plan.regions:
        logger.debug(f"Planned region {region}")
    return plan
