#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause


"""FWLayout Configuration utility tests.

This module contains unit tests for the Config class functionality,
including nested value access, typed getters and schema checks.
"""

import os

import pytest

from fwlayout.exceptions import FWLayoutError
from fwlayout.utils.config import Config
from fwlayout.utils.misc import write_file


def test_config_basic() -> None:
    """Test basic Config class functionality.

    Verifies that the Config class can store and retrieve values using both
    dictionary-style access and the get() method.
    """
    cfg = Config()
    cfg["test"] = 1
    assert 1 == cfg["test"]
    assert 1 == cfg.get("test")
    assert cfg.get("missing") is None
    assert cfg.get("missing", 5) == 5


def test_config_nested_get() -> None:
    """Test nested key path get functionalities for Config class."""
    cfg = Config()
    cfg["sections"] = {"text_size": "0x100"}
    assert "0x100" == cfg["sections"]["text_size"]
    assert "0x100" == cfg["sections/text_size"]
    assert "0x100" == cfg.get("sections/text_size")


def test_config_nested_set() -> None:
    """Test nested key path set functionality in Config class."""
    cfg = Config()
    cfg["target/aux_name"] = "ocram"
    assert "ocram" == cfg["target"]["aux_name"]
    assert "ocram" == cfg["target/aux_name"]


def test_config_nested_get_list() -> None:
    """Test list items addressed by their index in the key path."""
    cfg = Config()
    cfg["array"] = ["array_0", "array_1"]
    assert "array_0" == cfg["array/0"]
    assert "array_1" == cfg.get("array/1")


def test_config_typed_getters() -> None:
    """Test conversion of configuration values to integers and strings."""
    cfg = Config({"mem0_base": "0x1000", "stack_size": 256, "mode": "single-region"})
    assert cfg.get_int("mem0_base") == 0x1000
    assert cfg.get_int("stack_size") == 256
    assert cfg.get_int("mem1_base", 0) == 0
    assert cfg.get_optional_int("mem1_base") is None
    assert cfg.get_optional_int("mem0_base") == 0x1000
    assert cfg.get_str("mode") == "single-region"
    with pytest.raises(FWLayoutError):
        cfg.get_int("mem1_base")
    with pytest.raises(FWLayoutError):
        cfg.get_str("stack_size")
    with pytest.raises(FWLayoutError):
        cfg.get_int("mode")


def test_config_get_config() -> None:
    """Test getting of the sub configuration."""
    cfg = Config({"sections": {"text_size": 0x10}})
    cfg.config_dir = "/some/dir"
    sections = cfg.get_config("sections")
    assert isinstance(sections, Config)
    assert sections.get_int("text_size") == 0x10
    assert sections.config_dir == "/some/dir"
    assert cfg.get_config("target", Config()) == {}
    with pytest.raises(FWLayoutError):
        cfg.get_config("target")


def test_config_create_from_file(tmpdir) -> None:
    """Test loading of the configuration from a file."""
    path = os.path.join(tmpdir, "layout.yaml")
    write_file("mode: dual-region-fixed\nsections:\n  text_size: 0x200\n", path)
    cfg = Config.create_from_file(path)
    assert cfg["mode"] == "dual-region-fixed"
    assert cfg.get_int("sections/text_size") == 0x200
    assert cfg.config_name == "layout.yaml"
    assert os.path.samefile(cfg.config_dir, str(tmpdir))


def test_config_check() -> None:
    """Test the schema check of the configuration."""
    schema = {
        "type": "object",
        "properties": {"stack_size": {"type": ["string", "integer"], "format": "number"}},
        "required": ["stack_size"],
    }
    Config({"stack_size": "0x100"}).check([schema])
    with pytest.raises(FWLayoutError, match="Missing field"):
        Config({}).check([schema])
    with pytest.raises(FWLayoutError, match="cannot be converted to a number"):
        Config({"stack_size": "big"}).check([schema])
