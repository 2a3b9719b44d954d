#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""FWLayout schema-based configuration validation utilities.

This module validates configuration data against JSON schemas and renders
commented YAML configuration templates out of the same schemas.
"""

import copy
import io
import logging
import re
from typing import Any, Callable, Optional, Union

import fastjsonschema
from deepmerge import always_merger
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap as CMap

from fwlayout import FWLAYOUT_YML_INDENT
from fwlayout.exceptions import FWLayoutError
from fwlayout.utils.fw_enum import FwEnum
from fwlayout.utils.misc import value_to_int, wrap_text

logger = logging.getLogger(__name__)


class PropertyRequired(FwEnum):
    """Property requirement level used in configuration templates."""

    REQUIRED = (0, "REQUIRED", "Required")
    CONDITIONALLY_REQUIRED = (1, "CONDITIONALLY_REQUIRED", "Conditionally required")
    OPTIONAL = (2, "OPTIONAL", "Optional")


def _is_number(param: Any) -> bool:
    """Check if the input parameter represents a number.

    :param param: Input value to analyze for numeric representation.
    :return: True if input represents a number, False otherwise.
    """
    try:
        value_to_int(param)
        return True
    except FWLayoutError:
        return False


def _print_validation_fail_reason(exc: fastjsonschema.JsonSchemaValueException) -> str:
    """Format JSON schema validation failure into human-readable error message.

    :param exc: The JSON schema validation exception to process.
    :return: Formatted error message explaining the validation failure reason.
    """
    message = str(exc)
    if exc.rule == "required":
        missing = filter(lambda x: x not in exc.value.keys(), exc.rule_definition)
        message += f"; Missing field(s): {', '.join(missing)}"
    elif exc.rule == "format" and exc.rule_definition == "number":
        message += f"; Value '{exc.value}' cannot be converted to a number"
    return message


def check_unknown_properties(config_dict: dict, schema_dict: dict, path: str = "") -> None:
    """Recursively check for unknown properties in configuration against schema.

    Unknown properties are reported as warnings, they don't stop the processing.

    :param config_dict: Configuration dictionary to validate
    :param schema_dict: JSON schema dictionary defining allowed properties
    :param path: Current path in the configuration for error reporting
    """
    if "properties" not in schema_dict and "patternProperties" not in schema_dict:
        return

    schema_props = schema_dict.get("properties", {})
    pattern_props = schema_dict.get("patternProperties", {})

    for key, value in config_dict.items():
        current_path = f"{path}.{key}" if path else key

        if key in schema_props:
            if isinstance(value, dict) and isinstance(schema_props[key], dict):
                check_unknown_properties(value, schema_props[key], current_path)
            continue

        if not any(re.match(pattern, key) for pattern in pattern_props):
            logger.warning(f"Unknown property found in configuration: '{current_path}'")


def check_config(
    config: dict[str, Any],
    schemas: list[dict[str, Any]],
    extra_formatters: Optional[dict[str, Callable[[str], bool]]] = None,
    check_unknown_props: bool = False,
) -> None:
    """Check the configuration by provided list of validation schemas.

    The schemas are merged together and compiled with fastjsonschema.

    :param config: Configuration dictionary to validate.
    :param schemas: List of JSON schema dictionaries for validation.
    :param extra_formatters: Additional custom format validators for schema validation.
    :param check_unknown_props: Whether to check and warn about unknown properties in config.
    :raises FWLayoutError: Invalid validation schema or configuration validation failed.
    """
    custom_formatters: dict[str, Callable[[str], bool]] = {
        "number": _is_number,
    }

    config_to_check = copy.deepcopy(dict(config))

    schema: dict[str, Any] = {}
    for sch in schemas:
        always_merger.merge(schema, copy.deepcopy(sch))
    formats = always_merger.merge(custom_formatters, extra_formatters or {})
    if check_unknown_props and "properties" in schema:
        check_unknown_properties(config_to_check, schema)

    try:
        validator = fastjsonschema.compile(schema, formats=formats)
    except (TypeError, fastjsonschema.JsonSchemaDefinitionException) as exc:
        raise FWLayoutError(f"Invalid validation schema to check config: {str(exc)}") from exc
    try:
        validator(config_to_check)
    except fastjsonschema.JsonSchemaValueException as exc:
        message = _print_validation_fail_reason(exc)
        raise FWLayoutError(f"Configuration validation failed: {message}") from exc


class CommentedConfig:
    """FWLayout Configuration Template Generator.

    Generates commented YAML configuration templates, or commented dumps of
    existing configurations, out of the JSON validation schemas.

    :cvar MAX_LINE_LENGTH: Maximum line length for generated comments and formatting.
    """

    MAX_LINE_LENGTH = 120 - 2  # Minus '# '

    def __init__(
        self,
        main_title: str,
        schemas: list[dict[str, Any]],
        note: Optional[str] = None,
    ):
        """Initialize configuration template generator.

        :param main_title: Main title of the generated configuration template.
        :param schemas: List of JSON schema dictionaries to process for template generation.
        :param note: Optional additional note to display after the title section.
        """
        self.main_title = main_title
        self.schemas = schemas
        self.indent = 0
        self.note = note

    @property
    def max_line(self) -> int:
        """Get maximum line length adjusted for current indentation level."""
        return self.MAX_LINE_LENGTH - max(FWLAYOUT_YML_INDENT * (self.indent - 1), 0)

    @staticmethod
    def get_property_optional_required(key: str, block: dict[str, Any]) -> PropertyRequired:
        """Determine if a configuration property is required, optional, or conditionally required.

        The level is taken from the standard ``required`` list of the block, or from the
        ``template_required`` hint of the property itself.

        :param key: Name of the configuration property to check.
        :param block: JSON schema block containing property definitions and requirements.
        :return: Requirement level of the property.
        """
        if key in block.get("required", []):
            return PropertyRequired.REQUIRED
        hint = block["properties"][key].get("template_required")
        if hint:
            return PropertyRequired.from_label(hint)
        return PropertyRequired.OPTIONAL

    def _get_schema_value(self, block: dict[str, Any], custom_value: Any) -> Any:
        """Get the value for one property out of custom value, template value or default."""
        if block.get("type") == "object" and "properties" in block:
            return self._create_object_block(block, custom_value)
        if custom_value is not None:
            return custom_value
        return block.get("template_value", block.get("default", ""))

    def _create_object_block(
        self, block: dict[str, Any], custom_value: Optional[dict[str, Any]] = None
    ) -> CMap:
        """Create object block with data from schema definition.

        :param block: Source schema block containing object definition with properties.
        :param custom_value: Optional dictionary of custom property values to use instead of
            the template values. Properties missing in the custom value are skipped.
        :return: CMap configuration object containing the processed properties.
        :raises FWLayoutError: If block type is not 'object'.
        """
        if block.get("type") != "object":
            raise FWLayoutError(f"block type is not 'object' but {block.get('type')}")

        self.indent += 1
        cfg_m = CMap()
        for key, val_p in block.get("properties", {}).items():
            if val_p.get("skip_in_template", False) and not custom_value:
                continue
            value = custom_value.get(key) if custom_value else None
            if custom_value and value is None:
                continue
            cfg_m[key] = self._get_schema_value(val_p, value)
            required = self.get_property_optional_required(key, block).description
            self._add_comment(cfg_m, val_p, key, str(required))
        self.indent -= 1
        return cfg_m

    def _add_comment(self, cfg: CMap, schema: dict[str, Any], key: str, required: str) -> None:
        """Add comment block to configuration based on JSON schema.

        :param cfg: Target configuration where the comment should be stored
        :param schema: Object configuration JSON SCHEMA
        :param key: Config key
        :param required: Required text description
        """
        title = schema.get("title", "")
        descr = schema.get("description", "")
        enum_list = schema.get("enum_template", schema.get("enum", []))
        if not title:
            return
        comment = f"===== {title} [{required}] =====".center(self.max_line, "-")
        if descr:
            comment += wrap_text("\nDescription: " + descr, max_line=self.max_line)
        if enum_list:
            options = "Possible options: <" + ", ".join([str(x) for x in enum_list]) + ">"
            comment += wrap_text("\n" + options, max_line=self.max_line)
        cfg.yaml_set_comment_before_after_key(
            key, comment, indent=FWLAYOUT_YML_INDENT * (self.indent - 1)
        )

    def export(self, config: Optional[dict[str, Any]] = None) -> CMap:
        """Export configuration template into CommentedMap.

        :param config: Optional configuration dictionary to be applied to template.
        :raises FWLayoutError: Template generation failed.
        :return: Configuration template as CommentedMap.
        """
        self.indent = 0
        merged: dict[str, Any] = {}
        for schema in copy.deepcopy(self.schemas):
            always_merger.merge(merged, schema)
        merged.setdefault("type", "object")
        try:
            cfg = self._create_object_block(merged, config)
        except (KeyError, TypeError, ValueError) as exc:
            raise FWLayoutError(f"Template generation failed: {str(exc)}") from exc

        title = f"  {self.main_title}  ".center(self.MAX_LINE_LENGTH, "=") + "\n\n"
        if self.note:
            title += f"\n{' Note '.center(self.MAX_LINE_LENGTH, '-')}\n"
            title += wrap_text(self.note, self.max_line) + "\n"
        cfg.yaml_set_start_comment(title)
        return cfg

    def get_template(self) -> str:
        """Export configuration template directly into YAML string format.

        :return: Configuration template as YAML formatted string.
        """
        return self.convert_cm_to_yaml(self.export())

    def get_config(self, config: dict[str, Any]) -> str:
        """Export Configuration directly into YAML string format.

        :param config: Configuration dictionary to be exported.
        :return: YAML string representation of the configuration.
        """
        return self.convert_cm_to_yaml(self.export(config))

    @staticmethod
    def convert_cm_to_yaml(config: Union[CMap, dict]) -> str:
        """Convert Commented Map into final YAML string.

        :param config: Configuration in Commented Map format.
        :raises FWLayoutError: If configuration is empty.
        :return: YAML string with configuration ready for file storage.
        """
        if not config:
            raise FWLayoutError("Configuration cannot be empty")
        yaml = YAML(pure=True)
        yaml.indent(sequence=FWLAYOUT_YML_INDENT * 2, offset=FWLAYOUT_YML_INDENT)
        yaml.width = 200
        stream = io.StringIO()
        yaml.dump(config, stream)
        return stream.getvalue()
