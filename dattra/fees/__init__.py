"""
Fee allocation engine and procedure data.
"""

from .calculator import FeeCalculator, compute_single_procedure, compute_multi_procedure
from .models import ProcedureInput, ProcedureLine, AllocationResult, AggregateResult
from .procedures import ProcedureTable, ProcedureInfo
from .builder import build_procedure_input, build_procedure_lines, move_row, move_line

__all__ = [
    'FeeCalculator', 'compute_single_procedure', 'compute_multi_procedure',
    'ProcedureInput', 'ProcedureLine', 'AllocationResult', 'AggregateResult',
    'ProcedureTable', 'ProcedureInfo',
    'build_procedure_input', 'build_procedure_lines', 'move_row', 'move_line',
]
