#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Access to the FWLayout data files shipped with the package."""

import copy
import functools
import os
from typing import Any

from fwlayout import FWLAYOUT_DATA_FOLDER
from fwlayout.exceptions import FWLayoutValueError
from fwlayout.utils.misc import load_configuration


def get_data_file_path(path: str) -> str:
    """Get absolute path of a data file.

    :param path: Relative path in the data folder.
    :raises FWLayoutValueError: Non existing file path.
    :return: Final absolute path to data file.
    """
    file_path = os.path.join(FWLAYOUT_DATA_FOLDER, path).replace("\\", "/")
    if not os.path.isfile(file_path):
        raise FWLayoutValueError(f"The data file doesn't exist: {path}")
    return file_path


@functools.lru_cache(maxsize=None)
def _load_schema_file(path: str) -> dict[str, Any]:
    return load_configuration(path)


def get_schema_file(feature: str) -> dict[str, Any]:
    """Get JSON Schema file for the requested feature.

    The loaded file is cached, every call returns its own copy.

    :param feature: Name of the feature to get the schema for.
    :return: Loaded dictionary containing the JSON Schema configuration.
    """
    path = get_data_file_path(os.path.join("jsonschemas", f"sch_{feature}.yaml"))
    return copy.deepcopy(_load_schema_file(path))
