#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2026 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Verification report of computed memory layouts.

A report is a tree of named checks. Each check has a result, the report itself
takes the most severe result found anywhere in the tree.
"""

import textwrap
from dataclasses import dataclass
from typing import Optional, Type, Union

import colorama
import prettytable

from fwlayout.exceptions import FWLayoutError
from fwlayout.utils.fw_enum import FwEnum
from fwlayout.utils.misc import wrap_text


class VerifierResult(FwEnum):
    """Result of one check, the tag orders the results by severity."""

    SUCCEEDED = (0, "Succeeded", colorama.Fore.GREEN)
    WARNING = (1, "Warning", colorama.Fore.YELLOW)
    ERROR = (2, "Error", colorama.Fore.RED)

    @classmethod
    def draw(cls, res: "VerifierResult", colorize: bool = True) -> str:
        """Get the result label, colored by the ANSI color kept in the description.

        :param res: Result to draw.
        :param colorize: Add the ANSI color escape characters.
        :return: Result label.
        """
        if not colorize or not res.description:
            return res.label
        return f"{res.description}{res.label}{colorama.Fore.RESET}"


@dataclass
class VerifierRecord:
    """One check of the report."""

    name: str
    result: VerifierResult = VerifierResult.ERROR
    value: Optional[Union[str, int, bool]] = None
    # succeeded records which are not important are not drawn
    important: bool = True

    def draw(self, width: int, colorize: bool = True) -> str:
        """Draw the record wrapped to the line width."""
        text = f"{self.name}({VerifierResult.draw(self.result, colorize)}): "
        if self.value is not None:
            text += str(self.value)
        indent = " " * len(f"{self.name}(): {self.result.label}")
        return "\n".join(textwrap.wrap(text, width=width, subsequent_indent=indent))


class Verifier:
    """Tree of verification records.

    :cvar MAX_LINE_LENGTH: Line length of the drawn report.
    :cvar TITLE_FG_COLOR: Color of the verifier names and the title block.
    """

    MAX_LINE_LENGTH = 120
    TITLE_FG_COLOR = colorama.Fore.CYAN

    def __init__(self, name: str, description: Optional[str] = None, indent: int = 2) -> None:
        """Verifier constructor.

        :param name: Name of the verified object.
        :param description: Description drawn in a title block, the title block is omitted
            when not defined.
        :param indent: Indentation of the nested records.
        """
        self.name = name
        self.description = description
        self.indent = indent
        self.level = 1
        self.records: list[Union[VerifierRecord, "Verifier"]] = []

    def __repr__(self) -> str:
        return f"{self.name} verifier object"

    def __str__(self) -> str:
        return self.draw(colorize=False)

    @property
    def max_line(self) -> int:
        """Line length available on the current nesting level."""
        return self.MAX_LINE_LENGTH - self.indent * self.level

    def add_record(
        self,
        name: str,
        result: Union[VerifierResult, bool],
        value: Optional[Union[str, int, bool]] = None,
        important: bool = True,
    ) -> None:
        """Add one check to the report.

        :param name: Name of the check.
        :param result: Result of the check, True means SUCCEEDED and False means ERROR.
        :param value: Value shown with the result.
        :param important: Draw the record also when it succeeded.
        """
        if isinstance(result, bool):
            result = VerifierResult.SUCCEEDED if result else VerifierResult.ERROR
        self.records.append(VerifierRecord(name, result, value, important))

    def add_record_enum(
        self, name: str, value: Optional[Union[FwEnum, int, str]], enum: Type[FwEnum]
    ) -> None:
        """Add check that the value is a member of the enumeration.

        :param name: Name of the check.
        :param value: Enum member, its tag or label.
        :param enum: Enumeration the value must belong to.
        """
        if value is None:
            self.add_record(name, VerifierResult.ERROR, "Doesn't exist")
            return
        if isinstance(value, enum):
            member = value
        else:
            try:
                member = enum.from_attr(value)  # type: ignore[arg-type]
            except FWLayoutError:
                self.add_record(
                    name,
                    VerifierResult.ERROR,
                    f"{value} not fit to known enumeration {enum.__name__}",
                )
                return
        text = member.label
        if member.description:
            text += f", {member.description}"
        self.add_record(name, VerifierResult.SUCCEEDED, text)

    def add_child(self, child: "Verifier") -> None:
        """Nest another verifier into this one."""
        self.records.append(child)

    def get_count(self, results: Optional[list[VerifierResult]] = None) -> int:
        """Get count of records in the whole tree.

        :param results: Count only records with these results, all records by default.
        :return: Count of records.
        """
        count = 0
        for record in self.records:
            if isinstance(record, Verifier):
                count += record.get_count(results)
            elif results is None or record.result in results:
                count += 1
        return count

    @property
    def has_errors(self) -> bool:
        """Check if any record of the tree failed."""
        return self.get_count([VerifierResult.ERROR]) > 0

    @property
    def result(self) -> VerifierResult:
        """The most severe result of the whole tree."""
        return max(
            (record.result for record in self.records),
            key=lambda res: res.tag,
            default=VerifierResult.SUCCEEDED,
        )

    def _colors(self, colorize: bool) -> tuple[str, str]:
        if not colorize:
            return "", ""
        return self.TITLE_FG_COLOR, colorama.Fore.RESET

    def _title_block(self, colorize: bool) -> str:
        color, reset = self._colors(colorize)
        title = f" {self.name} ({VerifierResult.draw(self.result, colorize)}) "
        # the colors don't take any place on the line
        free = self.max_line - len(f" {self.name} ({self.result.label}) ")
        left = "=" * (free // 2)
        right = "=" * (free - free // 2)
        ret = f"{color}{left}{reset}{title}{color}{right}{reset}\n"
        ret += color + wrap_text(self.description or "", self.max_line) + "\n"
        ret += "=" * self.max_line + reset + "\n"
        return ret

    def _single_record(self) -> Optional[VerifierRecord]:
        """Get the only important record, if the verifier has no children."""
        important = []
        for record in self.records:
            if isinstance(record, Verifier):
                return None
            if record.important:
                important.append(record)
        return important[0] if len(important) == 1 else None

    def draw(self, results: Optional[list[VerifierResult]] = None, colorize: bool = True) -> str:
        """Draw the report.

        Succeeded verifiers without description holding a single important record
        are drawn on one line.

        :param results: Draw only records with these results, all by default.
        :param colorize: Add the ANSI color escape characters.
        :return: Report text.
        """
        if results and self.result not in results:
            return ""
        color, reset = self._colors(colorize)
        head = f"{color}{self.name}{reset}({VerifierResult.draw(self.result, colorize)})"

        if self.description is not None:
            ret = self._title_block(colorize)
        elif self.result == VerifierResult.SUCCEEDED and self._single_record():
            record = self._single_record()
            assert record
            return head + ("" if record.value is None else f": {record.value}") + "\n"
        else:
            ret = head + " \n"

        for record in self.records:
            if isinstance(record, Verifier):
                record.level = self.level + 1
                item = record.draw(results, colorize)
            else:
                hidden = record.result == VerifierResult.SUCCEEDED and not record.important
                if hidden or (results and record.result not in results):
                    continue
                item = record.draw(self.max_line, colorize) + "\n"
            ret += textwrap.indent(item, " " * self.indent)
        return ret

    def get_summary_table(self, colorize: bool = True) -> str:
        """Get table with the count of records per result.

        :param colorize: Add the ANSI color escape characters to the header.
        :return: Table text.
        """
        table = prettytable.PrettyTable(
            [VerifierResult.draw(res, colorize) for res in VerifierResult]
        )
        table.align = "c"
        table.add_row([self.get_count([res]) for res in VerifierResult])
        return str(table)
