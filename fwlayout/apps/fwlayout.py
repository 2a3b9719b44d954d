#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""CLI application to plan the firmware memory layout."""

import logging
import sys
from typing import Callable

import click

from fwlayout.apps.utils import fwlayout_logger
from fwlayout.apps.utils.common_cli_options import (
    CommandsTreeGroup,
    fwlayout_apps_common_options,
    fwlayout_config_option,
    fwlayout_output_option,
)
from fwlayout.apps.utils.utils import (
    FWLayoutAppError,
    catch_fwlayout_error,
    print_verifier_to_console,
)
from fwlayout.layout.exceptions import HeapRegionEmptyError
from fwlayout.layout.linker import render_c_header, render_json, render_linker_script, render_yaml
from fwlayout.layout.planner import LayoutPlanner
from fwlayout.layout.symbols import SymbolTable
from fwlayout.layout.types import MemoryPlan
from fwlayout.utils.config import Config
from fwlayout.utils.misc import get_printable_path, write_file

logger = logging.getLogger(__name__)

EXPORT_FORMATS: dict[str, Callable[[MemoryPlan, SymbolTable], str]] = {
    "yaml": render_yaml,
    "json": render_json,
    "ld": render_linker_script,
    "header": lambda plan, symbols: render_c_header(symbols, mode=plan.mode.label),
}

allow_empty_heap_option = click.option(
    "--allow-empty-heap",
    is_flag=True,
    default=False,
    help="Accept a layout without any space left for the heap, just print a warning.",
)


@click.group(name="fwlayout", no_args_is_help=True, cls=CommandsTreeGroup)
@fwlayout_apps_common_options
def main(log_level: int) -> None:
    """Collection of utilities for firmware memory layout planning."""
    fwlayout_logger.install(level=log_level)


def load_planner(config: str, allow_empty_heap: bool = False) -> LayoutPlanner:
    """Load the layout planner from configuration file.

    :param config: Path to the configuration file.
    :param allow_empty_heap: Accept a layout without heap.
    :return: Layout planner.
    """
    return LayoutPlanner.load_from_config(
        Config.create_from_file(config), allow_empty_heap=allow_empty_heap
    )


def run_planner(planner: LayoutPlanner) -> tuple[MemoryPlan, SymbolTable]:
    """Run the planner, empty heap errors get a hint how to accept such layout."""
    try:
        return planner.run()
    except HeapRegionEmptyError as exc:
        raise FWLayoutAppError(
            f"{exc}. Use --allow-empty-heap to accept a layout without heap.", error_code=2
        ) from exc


@main.command(name="get-template", no_args_is_help=True)
@fwlayout_output_option(force=True)
def get_template_command(output: str) -> None:
    """Create template of the layout configuration in YAML format."""
    get_template(output)


def get_template(output: str) -> None:
    """Create template of the layout configuration in YAML format."""
    write_file(LayoutPlanner.get_config_template(), output)
    click.echo(
        f"The layout configuration template has been saved into '{get_printable_path(output)}'"
    )


@main.command(name="plan", no_args_is_help=True)
@fwlayout_config_option()
@allow_empty_heap_option
def plan_command(config: str, allow_empty_heap: bool) -> None:
    """Compute the memory layout and print the regions and symbols."""
    planner = load_planner(config, allow_empty_heap)
    plan, symbols = run_planner(planner)
    click.echo(f"Memory layout mode: {plan.mode.label}")
    click.echo("Memory regions:")
    click.echo(plan.get_table())
    click.echo("Layout symbols:")
    click.echo(symbols.get_table())


@main.command(name="export", no_args_is_help=True)
@fwlayout_config_option()
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(list(EXPORT_FORMATS.keys()), case_sensitive=False),
    default="yaml",
    show_default=True,
    help="Format of the exported layout.",
)
@allow_empty_heap_option
@fwlayout_output_option(force=True)
def export_command(config: str, output_format: str, allow_empty_heap: bool, output: str) -> None:
    """Export the memory layout as YAML/JSON data, linker script fragment or C header."""
    export(config, output_format, allow_empty_heap, output)


def export(config: str, output_format: str, allow_empty_heap: bool, output: str) -> None:
    """Export the memory layout into file.

    :param config: Path to the configuration file.
    :param output_format: One of the export formats.
    :param allow_empty_heap: Accept a layout without heap.
    :param output: Output file path.
    """
    plan, symbols = run_planner(load_planner(config, allow_empty_heap))
    write_file(EXPORT_FORMATS[output_format.lower()](plan, symbols), output)
    click.echo(
        f"The memory layout has been exported in {output_format} format "
        f"into '{get_printable_path(output)}'"
    )


@main.command(name="verify", no_args_is_help=True)
@fwlayout_config_option()
@click.option(
    "-p",
    "--problems",
    is_flag=True,
    default=False,
    help="Show just problems (warnings and errors) in the configuration.",
)
def verify_command(config: str, problems: bool) -> None:
    """Verify the layout configuration and print the verification report."""
    planner = load_planner(config)
    verifier = planner.verify()
    print_verifier_to_console(verifier, problems)
    if verifier.has_errors:
        raise FWLayoutAppError("The layout configuration contains errors.", error_code=1)


@catch_fwlayout_error
def safe_main() -> None:
    """Call the main function."""
    sys.exit(main())  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    safe_main()
