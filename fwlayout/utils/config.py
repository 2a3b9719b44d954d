#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""FWLayout configuration management utilities.

A dictionary with nested key addressing ("sections/text_size"), typed getters
and schema validation, used to feed layout planner configurations loaded
from YAML or JSON files.
"""

import logging
import os
from typing import Any, Optional, Union

from typing_extensions import Self

from fwlayout.exceptions import FWLayoutError, FWLayoutKeyError
from fwlayout.utils.misc import load_configuration, value_to_int
from fwlayout.utils.schema_validator import check_config

logger = logging.getLogger(__name__)


class Config(dict):
    """FWLayout Configuration Manager.

    This class extends Python's dictionary to support nested key addressing
    using path separators and keeps the context about configuration source.

    :cvar SEP: Path separator used for nested key addressing in configuration.
    """

    SEP = "/"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Initialize configuration dictionary with default settings.

        :param args: Variable length argument list passed to parent dictionary constructor.
        :param kwargs: Arbitrary keyword arguments passed to parent dictionary constructor.
        """
        super().__init__(*args, **kwargs)
        self.config_dir = os.getcwd()
        self.config_name = ""
        self.search_paths: list[str] = []

    @classmethod
    def create_from_file(cls, file_path: str) -> Self:
        """Create configuration object from file.

        :param file_path: Path to the configuration file to load.
        :return: Configuration object with loaded data and set search paths.
        """
        cfg_abs_path = os.path.abspath(file_path).replace("\\", "/")
        cfg = cls(load_configuration(cfg_abs_path))
        cfg_dir = os.path.dirname(cfg_abs_path)
        cfg.search_paths = [cfg_dir]
        cfg.config_dir = cfg_dir
        cfg.config_name = os.path.basename(cfg_abs_path)
        return cfg

    @classmethod
    def get_path(cls, key: Union[str, int]) -> list:
        """Get keypath in list format.

        :param key: Key to convert - either string path with separators or single integer.
        :return: List of path components as integers or strings.
        """
        ret: list[Union[int, str]] = []

        if isinstance(key, int):
            return [str(key)]
        for k in key.split(cls.SEP):
            try:
                ret.append(value_to_int(k))
            except FWLayoutError:
                ret.append(k)
        return ret

    def get(self, key: str, defaults: Optional[Any] = None) -> Any:
        """Get configuration value with nested key support.

        :param key: Key name including support of key path with '/'.
        :param defaults: Default value in case that item doesn't exist, defaults to None.
        :return: Configuration value or default if key not found.
        """
        try:
            return self.__getitem__(key)
        except FWLayoutError:
            return defaults

    def __getitem__(self, key: str) -> Any:
        """Get configuration value by key path.

        :param key: Configuration key or '/' separated path to nested value
        :raises FWLayoutError: Invalid key path or unsupported data type in path
        :raises FWLayoutKeyError: Key doesn't exist in configuration
        :return: Configuration value at the specified key path
        """

        def gets(source: Any, key_path: list) -> Any:
            key = key_path.pop(0)
            if isinstance(source, list):
                if not isinstance(key, int):
                    raise FWLayoutError("Invalid key path - from list must be used number as key")
                ret = source[key]
            elif isinstance(source, dict):
                ret = dict.get(source, key)
            else:
                raise FWLayoutError("Invalid configuration key path.")

            if ret is None:
                raise FWLayoutKeyError(f"The {key} doesn't exists in configuration")

            if len(key_path):
                return gets(ret, key_path)

            return ret

        try:
            return gets(self, self.get_path(key))
        except FWLayoutKeyError:
            return gets(self, [key])

    def __setitem__(self, key: str, value: Any) -> None:
        """Set configuration value using '/' separated key path.

        :param key: Key path (e.g., 'sections/text_size').
        :param value: Value to set at the specified key path.
        :raises FWLayoutError: Invalid configuration key path.
        """

        def sets(dest: Any, key_path: list, value: Any) -> None:
            key = key_path.pop(0)

            if isinstance(key, int):
                if len(key_path) == 0:
                    dest[key] = value
                    return
                sets(dest[key], key_path, value)
            elif isinstance(key, str):
                if len(key_path) == 0:
                    dict.__setitem__(dest, key, value)
                    return
                if key not in dest:
                    dict.__setitem__(dest, key, {})
                sets(dict.__getitem__(dest, key), key_path, value)
            else:
                raise FWLayoutError("Invalid configuration key path.")

        sets(self, self.get_path(key), value)

    def get_config(self, key: str, default: Optional["Config"] = None) -> "Config":
        """Get the key value as Config object.

        :param key: Key name of the sub configuration.
        :param default: Default value if configuration doesn't contain the key.
        :raises FWLayoutKeyError: The key is not found in configuration and no default provided.
        :return: Sub configuration as Config object.
        """
        cfg = self.get(key, default)
        if cfg is None:
            raise FWLayoutKeyError(f"The value is not in config at key: {key}")
        ret = Config(cfg)
        ret.search_paths = self.search_paths
        ret.config_dir = self.config_dir

        return ret

    def get_int(self, key: str, default: Optional[int] = None) -> int:
        """Get the key value as integer.

        :param key: Key name of the sub configuration.
        :param default: Default value if configuration doesn't contain it.
        :raises FWLayoutError: The value is not integer at specified key.
        :return: Integer loaded from configuration.
        """
        ret = self.get(key, default)
        if ret is None:
            raise FWLayoutError(f"The value is not integer at key: {key}")
        return value_to_int(ret)

    def get_optional_int(self, key: str) -> Optional[int]:
        """Get the key value as integer, None when the key is not defined.

        :param key: Key name of the configuration entry.
        :return: Integer loaded from configuration or None.
        """
        ret = self.get(key)
        if ret is None:
            return None
        return value_to_int(ret)

    def get_str(self, key: str, default: Optional[str] = None) -> str:
        """Get the key value as string.

        :param key: Key name of the configuration entry.
        :param default: Default value to return if the key doesn't exist in configuration.
        :raises FWLayoutError: If the retrieved value is not a string type.
        :return: Configuration value as string.
        """
        ret = self.get(key, default)
        if not isinstance(ret, str):
            raise FWLayoutError(f"The value is not string at key: {key}")
        return ret

    def check(self, schemas: list[dict[str, Any]], check_unknown_props: bool = False) -> None:
        """Check configuration against validation schemas.

        :param schemas: List of validation schemas.
        :param check_unknown_props: If True, check for unknown properties in config
            and print warnings.
        """
        check_config(self, schemas, check_unknown_props=check_unknown_props)
