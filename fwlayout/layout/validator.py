#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Validation of the raw layout configuration.

Checks run in a fixed order, so the first failing check decides the reported
error: mode, always-required parameters, mode specific parameters, value
ranges and finally the coarse stack size check.
"""

import logging
from typing import Any

from fwlayout.exceptions import FWLayoutKeyError
from fwlayout.layout.exceptions import (
    InvalidModeError,
    InvalidParameterError,
    MissingParameterError,
    RegionOverlapError,
    StackTooLargeError,
)
from fwlayout.layout.types import LayoutConfig, LayoutMode, MemoryRegion, ValidatedConfig
from fwlayout.utils.misc import MAX_64BIT, check_range

logger = logging.getLogger(__name__)

COMMON_PARAMETERS = ("mem0_base", "mem0_size", "stack_size")
DUAL_REGION_PARAMETERS = ("mem1_base", "mem1_size")


def resolve_mode(mode: Any) -> LayoutMode:
    """Resolve the layout mode from its enum member, label or numeric tag.

    :param mode: Mode as given by the configuration.
    :raises MissingParameterError: Mode is not defined.
    :raises InvalidModeError: Mode is not recognized.
    :return: Layout mode.
    """
    if mode is None:
        raise MissingParameterError("mode")
    if isinstance(mode, LayoutMode):
        return mode
    # bool is an int subclass, but True/False are not mode selectors
    if isinstance(mode, bool) or not isinstance(mode, (int, str)):
        raise InvalidModeError(mode)
    # labels are matched exactly, the enum lookup itself ignores the case
    if isinstance(mode, str) and mode not in LayoutMode.labels():
        raise InvalidModeError(mode)
    try:
        return LayoutMode.from_attr(mode)
    except FWLayoutKeyError as exc:
        raise InvalidModeError(mode) from exc


def _check_value(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(name, value, "integer expected")
    if not check_range(value, 0, MAX_64BIT):
        raise InvalidParameterError(name, value, "out of the 64-bit range")
    return value


def _check_region(name: str, base: int, size: int) -> MemoryRegion:
    if base + size > MAX_64BIT + 1:
        raise InvalidParameterError(
            f"{name}_size", size, f"region {name} exceeds the 64-bit address space"
        )
    return MemoryRegion(name, base, size)


def validate(config: LayoutConfig) -> ValidatedConfig:
    """Validate the raw layout configuration.

    :param config: Raw layout configuration.
    :raises MissingParameterError: Mode or a parameter needed by the mode is missing.
    :raises InvalidModeError: Mode is not recognized.
    :raises InvalidParameterError: Parameter is not a non-negative 64-bit integer.
    :raises RegionOverlapError: The two physical regions overlap.
    :raises StackTooLargeError: Stack is not smaller than the region hosting it.
    :return: Validated configuration.
    """
    mode = resolve_mode(config.mode)
    logger.debug(f"Validating layout configuration in mode {mode.label}")

    required = COMMON_PARAMETERS + (DUAL_REGION_PARAMETERS if mode.is_dual else ())
    for name in required:
        if getattr(config, name) is None:
            raise MissingParameterError(name)

    mem0_base, mem0_size, stack_size = (
        _check_value(name, getattr(config, name)) for name in COMMON_PARAMETERS
    )
    mem1_base, mem1_size = (
        None if getattr(config, name) is None else _check_value(name, getattr(config, name))
        for name in DUAL_REGION_PARAMETERS
    )

    mem0 = _check_region("mem0", mem0_base, mem0_size)
    if mode.is_dual:
        assert mem1_base is not None and mem1_size is not None
        mem1 = _check_region("mem1", mem1_base, mem1_size)
        if mem0.overlaps(mem1):
            raise RegionOverlapError(mem0.name, mem1.name)

    validated = ValidatedConfig(
        mode=mode,
        mem0_base=mem0_base,
        mem0_size=mem0_size,
        stack_size=stack_size,
        mem1_base=mem1_base,
        mem1_size=mem1_size,
        target=config.target,
    )

    region_name = "mem1" if mode.is_dual else "mem0"
    if validated.stack_size >= validated.data_region_size:
        raise StackTooLargeError(validated.stack_size, region_name, validated.data_region_size)

    logger.debug(f"Layout configuration is valid: {validated}")
    return validated
