#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""FWLayout - Firmware memory layout planner.

Computes the static memory layout of a firmware image before it is linked:
the code, data, bss, stack and heap boundaries for one or two physical memory
regions, together with the named layout symbols consumed by the linker and by
the firmware startup code.
"""

import os
import sys

from packaging.version import Version, parse
from platformdirs import PlatformDirs


class FWLayoutPlatformDirs(PlatformDirs):
    """FWLayout Platform Directories Manager.

    Normalizes the cache directory location on Windows so it sits next to the
    logs directory, the same way it does on other platforms.
    """

    @property
    def user_cache_dir(self) -> str:
        """Get cache directory tied to the user.

        :return: Absolute path to the user cache directory.
        """
        if sys.platform != "win32":
            return super().user_cache_dir
        path = os.path.join(self.user_data_dir, "Cache")
        self._optionally_create_directory(path)
        return path


def get_fwlayout_version() -> Version:
    """Get FWLayout version information.

    Retrieves the version either from the generated __version__ module
    or dynamically using setuptools_scm when running from a source checkout.

    :return: Parsed version object.
    """
    try:
        from .__version__ import __version__ as fwlayout_version
    except ImportError:
        from setuptools_scm import get_version

        fwlayout_version = get_version(
            root="..", relative_to=__file__, fallback_version="0.0.0"
        )
    return parse(fwlayout_version)


def value_to_bool(value: object) -> bool:
    """Convert value to boolean from environment variable formats.

    :param value: Value to convert ("True", "true", "T", "1" are true).
    :return: Boolean representation of the input value.
    """
    if isinstance(value, str):
        return value in ("True", "true", "T", "1")
    return bool(value)


version = get_fwlayout_version()

__author__ = "NXP"
__license__ = "BSD-3-Clause"
__version__ = str(version)

FWLAYOUT_VERSION_BASE = version.base_version

FWLAYOUT_PLATFORM_DIRS = FWLayoutPlatformDirs(
    appauthor="nxp",
    appname="fwlayout",
    version=FWLAYOUT_VERSION_BASE,
    ensure_exists=False,
)

FWLAYOUT_DEBUG = value_to_bool(os.environ.get("FWLAYOUT_DEBUG"))

FWLAYOUT_YML_INDENT = 2

FWLAYOUT_DEBUG_LOGGING_DISABLED = value_to_bool(
    os.environ.get("FWLAYOUT_DEBUG_LOGGING_DISABLED")
)
FWLAYOUT_DEBUG_LOG_FILE = os.environ.get(
    "FWLAYOUT_DEBUG_LOG_FILE", os.path.join(FWLAYOUT_PLATFORM_DIRS.user_log_dir, "debug.log")
)

# FWLAYOUT_DATA_FOLDER might be redefined by FWLAYOUT_DATA_FOLDER env variable
FWLAYOUT_DATA_FOLDER = os.environ.get("FWLAYOUT_DATA_FOLDER") or os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "data"
)
