"""
Data validation utilities for the medical fee calculator.
"""

import math
import re
from typing import List, Dict, Any, Optional, Sequence, Tuple, Union
import logging

from ..fees.models import ProcedureInput, AllocationResult, AggregateResult


class DataValidator:
    """Validate procedure inputs before calculation and results after it."""

    CODE_PATTERN = r'^0\d\.\d{2}\.\d{2}\.\d{3}-\d$'

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize validator.

        Args:
            config: Configuration dictionary
        """
        self.config = config or {}
        self.logger = logging.getLogger(f"dattra.{self.__class__.__name__}")

        # Validation rules
        self.max_assistants = self.config.get('max_assistants', 5)
        self.tolerance = self.config.get('tolerance', 1e-6)

    def validate_procedure_code(self, code: Optional[str]) -> bool:
        """
        Validate procedure code format (SUS table codes).

        Args:
            code: Procedure code to validate

        Returns:
            True if the code has 10 digits, starts with 0 and is masked as xx.xx.xx.xxx-x
        """
        if not code:
            return False
        return bool(re.match(self.CODE_PATTERN, code))

    def validate_procedure_input(self, procedure: ProcedureInput, label: str = "") -> Tuple[bool, List[str]]:
        """
        Validate a procedure before calculating it.

        Args:
            procedure: Procedure inputs
            label: Prefix for error messages (e.g. "Line 2")

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []
        prefix = f"{label}: " if label else ""

        if not self.validate_procedure_code(procedure.code):
            errors.append(f"{prefix}Invalid procedure code: '{procedure.code}' "
                          "(expected 10 digits starting with 0, formatted xx.xx.xx.xxx-x)")

        if procedure.point_count < 0:
            errors.append(f"{prefix}Point count cannot be negative: {procedure.point_count}")

        for name, value in (('SP', procedure.value_sp),
                            ('SH', procedure.value_sh),
                            ('TSP', procedure.value_tsp)):
            if value < 0:
                errors.append(f"{prefix}Value {name} cannot be negative: {value:.2f}")

        if procedure.surcharge_percent < 0:
            errors.append(f"{prefix}Surcharge cannot be negative: {procedure.surcharge_percent}%")

        if not 0 <= procedure.assistant_count <= self.max_assistants:
            errors.append(f"{prefix}Invalid assistant count: {procedure.assistant_count} "
                          f"(must be between 0 and {self.max_assistants})")

        return len(errors) == 0, errors

    def validate_lines(
        self,
        principal_code: Optional[str],
        lines: Sequence[ProcedureInput],
        procedure_table: Any = None
    ) -> Tuple[bool, List[str]]:
        """
        Validate a multi-procedure calculation before running it.

        Args:
            principal_code: Code of the principal procedure
            lines: Procedure lines in billing order
            procedure_table: Table used to cap the number of lines

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        if not principal_code:
            errors.append("Principal procedure is required")
        elif not self.validate_procedure_code(principal_code):
            errors.append(f"Invalid principal procedure code: '{principal_code}'")

        if not lines:
            errors.append("At least one procedure line is required")
            return False, errors

        if procedure_table is not None and principal_code:
            max_lines = procedure_table.max_lines(principal_code)
            if len(lines) > max_lines:
                errors.append(f"Too many lines for principal procedure {principal_code}: "
                              f"{len(lines)} (maximum: {max_lines})")

        for i, line in enumerate(lines, start=1):
            _, line_errors = self.validate_procedure_input(line, label=f"Line {i}")
            errors.extend(line_errors)

        if errors:
            self.logger.debug(f"Line validation failed with {len(errors)} errors")

        return len(errors) == 0, errors

    def validate_result(self, result: Union[AllocationResult, AggregateResult]) -> Tuple[bool, List[str]]:
        """
        Check the consistency of a computed result.

        Args:
            result: Single or aggregate result

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        expected_total = result.adjusted_value_sh + result.value_tsp + result.adjusted_value_sp
        if not math.isclose(result.total_procedure_value, expected_total, abs_tol=self.tolerance):
            errors.append(f"Total procedure value {result.total_procedure_value:.2f} differs from "
                          f"SH + TSP + SP = {expected_total:.2f}")

        role_sum = sum(result.role_values)
        if isinstance(result, AggregateResult):
            # lines without points distribute nothing
            expected_pool = sum(line.pool_value for line in result.lines if line.total_points > 0)
        else:
            expected_pool = result.pool_value if result.total_points > 0 else 0.0
        if not math.isclose(role_sum, expected_pool, rel_tol=1e-9, abs_tol=self.tolerance):
            errors.append(f"Role values sum {role_sum:.2f} differs from pool value {expected_pool:.2f}")

        for name in ('anesthesia_value', 'pool_value', 'total_procedure_value'):
            value = getattr(result, name)
            if math.isnan(value) or value < 0:
                errors.append(f"Invalid {name}: {value}")

        if isinstance(result, AggregateResult):
            line_total = sum(line.total_procedure_value for line in result.lines)
            if not math.isclose(result.total_procedure_value, line_total, rel_tol=1e-9, abs_tol=self.tolerance):
                errors.append(f"Aggregate total {result.total_procedure_value:.2f} differs from "
                              f"sum of lines {line_total:.2f}")

        return len(errors) == 0, errors
