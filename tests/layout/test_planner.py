#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Layout planner tests."""

import logging

import pytest
import yaml

from fwlayout.exceptions import FWLayoutError
from fwlayout.layout.exceptions import InvalidModeError, MissingParameterError
from fwlayout.layout.planner import LayoutPlanner, plan_layout
from fwlayout.layout.types import LayoutConfig, LayoutMode, SectionSizes, TargetConstants
from fwlayout.utils.config import Config
from fwlayout.utils.verifier import VerifierResult

SINGLE_CFG = {
    "mode": "single-region",
    "mem0_base": "0x1000",
    "mem0_size": "0x2000",
    "stack_size": 0x100,
}
FIXED_CFG = {
    "mode": "dual-region-fixed",
    "mem0_base": 0,
    "mem0_size": "0x4000",
    "mem1_base": "0x8000",
    "mem1_size": "0x1000",
    "stack_size": "0x40",
    "sections": {"text_size": "0x1000", "data_size": 0x40, "bss_size": "0x80"},
}


def test_plan_layout_single_region() -> None:
    """Test the whole pipeline for the basic single region layout."""
    plan, symbols = plan_layout(LayoutConfig("single-region", 0x1000, 0x2000, stack_size=0x100))
    assert plan.stack.origin == 0x2F00
    assert plan.get_region("mem0").length == 0x1F00
    assert symbols["HEAP_START"] == 0x1000
    assert symbols["HEAP_END"] == 0x2F00
    assert symbols["STACK_PRIVILEGED_TOP"] == 0x2800


def test_plan_layout_dual_region_fixed() -> None:
    """Test the whole pipeline for the basic dual region layout."""
    config = LayoutConfig(
        mode="dual-region-fixed",
        mem0_base=0x0,
        mem0_size=0x4000,
        mem1_base=0x8000,
        mem1_size=0x1000,
        stack_size=0x40,
    )
    plan, symbols = plan_layout(config)
    assert plan.get_region("mem1").length == 0xFC0
    assert plan.stack.origin == 0x8FC0
    assert plan.stack.length == 0x40
    assert symbols["HEAP_START"] == 0x8000
    assert symbols["HEAP_END"] == 0x8FC0


def test_load_from_config() -> None:
    """Test loading of the planner with numbers written in various formats."""
    planner = LayoutPlanner.load_from_config(Config(FIXED_CFG))
    assert planner.config.mode == "dual-region-fixed"
    assert planner.config.mem0_base == 0
    assert planner.config.mem1_base == 0x8000
    assert planner.config.stack_size == 0x40
    assert planner.config.target == TargetConstants()
    assert planner.sections == SectionSizes(text_size=0x1000, data_size=0x40, bss_size=0x80)
    assert "dual-region-fixed" in str(planner)


def test_load_from_config_numeric_mode() -> None:
    """Test that numeric mode selectors written as strings are accepted."""
    planner = LayoutPlanner.load_from_config(Config({**SINGLE_CFG, "mode": "2"}))
    assert planner.config.mode == 2
    with pytest.raises(MissingParameterError) as exc:
        planner.run()
    assert exc.value.name == "mem1_base"


def test_load_from_config_target() -> None:
    """Test the override of the target constants."""
    cfg = Config({**SINGLE_CFG, "target": {"stack_alignment": 16, "aux_base": "0x30000000"}})
    planner = LayoutPlanner.load_from_config(cfg)
    assert planner.config.target.stack_alignment == 16
    assert planner.config.target.aux_base == 0x3000_0000
    assert planner.config.target.aux_name == "sram"
    assert planner.plan().aux.origin == 0x3000_0000


@pytest.mark.parametrize(
    "update",
    [
        {"mem0_base": "not a number"},
        {"mem0_size": [0x1000]},
        {"sections": {"text_size": "0xZZ"}},
        {"target": {"aux_name": 5}},
    ],
)
def test_load_from_config_invalid_types(update) -> None:
    """Test that the schema refuses values of wrong types."""
    with pytest.raises(FWLayoutError, match="Configuration validation failed"):
        LayoutPlanner.load_from_config(Config({**SINGLE_CFG, **update}))


def test_load_from_config_unknown_property(caplog) -> None:
    """Test that unknown properties are just reported."""
    caplog.set_level(logging.WARNING)
    LayoutPlanner.load_from_config(Config({**SINGLE_CFG, "heap_size": 0x100}))
    assert "heap_size" in caplog.text


def test_load_from_config_missing_values_left_to_validator() -> None:
    """Test that missing values are reported by the validator, not the schema."""
    planner = LayoutPlanner.load_from_config(Config({"mode": "dual-region-relocated"}))
    with pytest.raises(MissingParameterError) as exc:
        planner.validate()
    assert exc.value.name == "mem0_base"


def test_invalid_mode_from_config() -> None:
    """Test that an unknown mode is reported by the validator."""
    planner = LayoutPlanner.load_from_config(Config({**SINGLE_CFG, "mode": "quad-region"}))
    with pytest.raises(InvalidModeError):
        planner.plan()


def test_get_config_round_trip() -> None:
    """Test that the exported configuration loads back into an equal planner."""
    target = TargetConstants(stack_alignment=16, aux_name="ocram")
    config = LayoutConfig(
        mode=LayoutMode.DUAL_REGION_RELOCATED,
        mem0_base=0x0,
        mem0_size=0x4000,
        mem1_base=0x8000,
        mem1_size=0x1000,
        stack_size=0x40,
        target=target,
    )
    planner = LayoutPlanner(config, SectionSizes(text_size=0x100))
    cfg = planner.get_config()
    assert cfg["mode"] == "dual-region-relocated"
    assert cfg["mem1_base"] == "0x00008000"
    assert cfg["target/aux_name"] == "ocram"
    loaded = LayoutPlanner.load_from_config(cfg)
    assert loaded.run() == planner.run()


def test_get_config_default_target_omitted() -> None:
    """Test that default target constants are not exported."""
    cfg = LayoutPlanner.load_from_config(Config(SINGLE_CFG)).get_config()
    assert "target" not in cfg
    assert "mem1_base" not in cfg
    assert cfg["sections/text_size"] == "0x00000000"


def test_get_config_template() -> None:
    """Test that the configuration template is commented and loads as valid planner."""
    template = LayoutPlanner.get_config_template()
    assert "Firmware memory layout configuration template" in template
    assert "Memory layout mode [Required]" in template
    assert "Base address of mem1 [Conditionally required]" in template
    assert "single-region, dual-region-relocated, dual-region-fixed" in template
    assert "target" not in yaml.safe_load(template)

    planner = LayoutPlanner.load_from_config(Config(yaml.safe_load(template)))
    plan, symbols = planner.run()
    assert plan.mode is LayoutMode.SINGLE_REGION
    assert symbols["STACK_END"] == 0x10000


def test_verify_succeeded() -> None:
    """Test the verification of a correct layout."""
    planner = LayoutPlanner.load_from_config(Config({**SINGLE_CFG, "stack_size": 0x1000}))
    verifier = planner.verify()
    assert verifier.result == VerifierResult.SUCCEEDED
    assert not verifier.has_errors
    assert "Stack in the top of its region(Succeeded)" in str(verifier)
    assert verifier.get_count([VerifierResult.WARNING]) == 0


def test_verify_warnings() -> None:
    """Test the warnings of a plan with changed stack size and tiny stack."""
    planner = LayoutPlanner(LayoutConfig("single-region", 0x1000, 0x2000, stack_size=0x103))
    verifier = planner.verify()
    assert verifier.result == VerifierResult.WARNING
    output = verifier.draw(results=[VerifierResult.WARNING], colorize=False)
    assert "Size changed by alignment" in output
    assert "Privileged stack" in output


def test_verify_stack_exceeds_unaligned_region() -> None:
    """Test the warning of the stack passing an unaligned region end."""
    planner = LayoutPlanner(LayoutConfig("single-region", 0x1003, 0x2000, stack_size=0x1000))
    verifier = planner.verify()
    assert not verifier.has_errors
    assert "Stack exceeds its region" in str(verifier)


@pytest.mark.parametrize(
    "config,message",
    [
        (LayoutConfig("dual-region-relocated", 0x0, 0x100, stack_size=0x10), "mem1_base"),
        (LayoutConfig("single-region", 0x0, 0x100, stack_size=0x100), "Stack"),
        (LayoutConfig("mixed-region", 0x0, 0x100, stack_size=0x10), "mixed-region"),
        (LayoutConfig("single-region", 0xE630_0000, 0x10000, stack_size=0x100), "sram"),
        (LayoutConfig("SINGLE-REGION", 0x0, 0x100, stack_size=0x10), "SINGLE-REGION"),
    ],
)
def test_verify_plan_error(config, message) -> None:
    """Test that planning errors are reported by the verifier."""
    verifier = LayoutPlanner(config).verify()
    assert verifier.has_errors
    assert verifier.result == VerifierResult.ERROR
    assert message in verifier.draw(results=[VerifierResult.ERROR], colorize=False)


def test_verify_section_overflow() -> None:
    """Test that sections not fitting into regions are verification errors."""
    planner = LayoutPlanner.load_from_config(
        Config({**SINGLE_CFG, "sections": {"text_size": "0x2000"}})
    )
    verifier = planner.verify()
    assert verifier.has_errors
    assert ".text" in str(verifier)


def test_verify_empty_heap() -> None:
    """Test that an empty heap is only a warning in the verification."""
    planner = LayoutPlanner.load_from_config(
        Config({**SINGLE_CFG, "sections": {"text_size": "0x1F00"}})
    )
    verifier = planner.verify()
    assert not verifier.has_errors
    assert "Heap region is empty" in str(verifier)
