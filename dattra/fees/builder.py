"""
Build engine inputs from raw form fields.

Form values arrive as typed in the UI ("R$ 1.234,56", "10", ""), and every
field is coerced with the currency helpers, so malformed text becomes 0.
"""

from dataclasses import replace
from typing import Dict, Any, List, Sequence

from .models import ProcedureInput, ProcedureLine
from ..utils.currency import currency_to_number, parse_int


def _surcharge(form: Dict[str, Any]) -> int:
    # the surcharge field only counts while its switch is on
    if not form.get('surcharge_enabled', True):
        return 0
    return max(parse_int(form.get('surcharge_percent')), 0)


def build_procedure_input(form: Dict[str, Any]) -> ProcedureInput:
    """
    Convert single-procedure form fields into a ProcedureInput.

    Args:
        form: Raw fields keyed like ProcedureInput, plus an optional
            'surcharge_enabled' switch

    Returns:
        ProcedureInput with parsed amounts
    """
    return ProcedureInput(
        code=(form.get('code') or '').strip(),
        point_count=parse_int(form.get('point_count')),
        value_sp=currency_to_number(form.get('value_sp')),
        value_sh=currency_to_number(form.get('value_sh')),
        value_tsp=currency_to_number(form.get('value_tsp')),
        surcharge_percent=_surcharge(form),
        assistant_count=min(max(parse_int(form.get('assistant_count')), 0), 5),
        anesthesia_enabled=bool(form.get('anesthesia_enabled', False)),
    )


def build_procedure_lines(rows: Sequence[Dict[str, Any]]) -> List[ProcedureLine]:
    """
    Convert multi-procedure form rows into numbered ProcedureLines.

    Args:
        rows: Raw fields of each line, in billing order

    Returns:
        ProcedureLines with 1-based line_index matching their position
    """
    lines = []
    for position, row in enumerate(rows, start=1):
        procedure = build_procedure_input(row)
        lines.append(ProcedureLine(
            **procedure.to_dict(),
            line_index=position,
            description=(row.get('description') or '').strip(),
        ))
    return lines


def move_row(rows: Sequence[Any], source: int, target: int) -> List[Any]:
    """
    Move an item of an ordered list to another position.

    Works on raw form rows as well as built lines.

    Args:
        rows: Current rows
        source: 0-based index of the row to move
        target: 0-based index where it should end up

    Returns:
        New list; the input is left unchanged. Out of range indexes return a plain copy
    """
    reordered = list(rows)
    if source == target or not 0 <= source < len(reordered) or not 0 <= target < len(reordered):
        return reordered

    reordered.insert(target, reordered.pop(source))
    return reordered


def move_line(lines: Sequence[ProcedureLine], source: int, target: int) -> List[ProcedureLine]:
    """Move a line to another position and renumber every line from 1."""
    reordered = move_row(lines, source, target)
    return [replace(line, line_index=position) for position, line in enumerate(reordered, start=1)]
