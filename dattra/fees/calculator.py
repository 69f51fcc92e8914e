"""
Fee allocation calculator for AIH medical fees (honorários médicos).
"""

from typing import Dict, Any, List, Optional, Sequence, Tuple, Union
import logging

from .models import ProcedureInput, ProcedureLine, AllocationResult, AggregateResult


class FeeCalculator:
    """Split the SP value of a procedure among surgeon, anesthesiologist and assistants."""

    # Share of the adjusted SP value reserved for the anesthesiologist
    ANESTHESIA_RATE = 0.30

    # Point weight of each assistant relative to the surgeon (1st, 2nd, ..., 5th)
    ASSISTANT_WEIGHTS = (0.30, 0.20, 0.20, 0.20, 0.20)

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize fee calculator.

        Args:
            config: Configuration dictionary
        """
        self.config = config or {}
        self.logger = logging.getLogger(f"dattra.{self.__class__.__name__}")

        self.anesthesia_rate = self.config.get('anesthesia_rate', self.ANESTHESIA_RATE)

        first_rate = self.config.get('first_assistant_rate', self.ASSISTANT_WEIGHTS[0])
        other_rate = self.config.get('other_assistant_rate', self.ASSISTANT_WEIGHTS[1])
        self.assistant_weights = (first_rate,) + (other_rate,) * (len(self.ASSISTANT_WEIGHTS) - 1)

    def allocate(self, procedure: ProcedureInput) -> AllocationResult:
        """
        Calculate the fee split of a single procedure.

        Args:
            procedure: Procedure inputs with already parsed amounts

        Returns:
            AllocationResult with every role value
        """
        result = self._allocate(
            procedure,
            sh_portion=procedure.value_sh,
            sh_percentage=100.0,
        )

        self.logger.info(f"Calculated procedure {procedure.code}: "
                         f"SP {result.adjusted_value_sp:.2f}, "
                         f"pool {result.pool_value:.2f}, "
                         f"total {result.total_procedure_value:.2f}")
        return result

    def allocate_multiple(
        self,
        principal_code: str,
        lines: Sequence[ProcedureInput],
        percentage_table: Any = None
    ) -> AggregateResult:
        """
        Calculate several procedure lines governed by a principal procedure.

        Each line's SH value is scaled by the percentage configured for its
        position under the principal procedure. Lines beyond the configured
        percentages keep their full SH value. SP is never scaled.

        Args:
            principal_code: Code of the principal procedure
            lines: Procedure lines in billing order (at least one)
            percentage_table: Lookup exposing get_percentages(code), or a
                mapping of code to percentages

        Returns:
            AggregateResult with per-line results and summed totals
        """
        percentages = self._resolve_percentages(principal_code, percentage_table)
        if not percentages:
            self.logger.warning(f"No SH percentages for principal procedure {principal_code}, "
                                "using full SH values")

        results = []
        for i, line in enumerate(lines):
            sh_percentage, sh_portion = self._scale_sh(line.value_sh, percentages, i)
            if i >= len(percentages):
                self.logger.debug(f"Line {i + 1} has no configured percentage, using 100% of SH")

            result = self._allocate(
                line,
                sh_portion=sh_portion,
                sh_percentage=sh_percentage,
                line_index=i + 1,
                description=getattr(line, 'description', ''),
            )
            results.append(result)

        aggregate = self._aggregate(principal_code, results, percentage_table)

        self.logger.info(f"Calculated {len(results)} lines for principal {principal_code}: "
                         f"SH {aggregate.adjusted_value_sh:.2f}, "
                         f"SP {aggregate.adjusted_value_sp:.2f}, "
                         f"total {aggregate.total_procedure_value:.2f}")
        return aggregate

    def _allocate(
        self,
        procedure: ProcedureInput,
        sh_portion: float,
        sh_percentage: float,
        line_index: int = 0,
        description: str = ""
    ) -> AllocationResult:
        """Run the allocation formula on an SH value that may already be scaled."""
        adjusted_sh = self._apply_surcharge(sh_portion, procedure.surcharge_percent)
        adjusted_sp = self._apply_surcharge(procedure.value_sp, procedure.surcharge_percent)

        anesthesia_value = adjusted_sp * self.anesthesia_rate if procedure.anesthesia_enabled else 0.0
        pool_value = adjusted_sp - anesthesia_value

        weights = self._role_weights(procedure.point_count, procedure.assistant_count)
        total_points = sum(weights)
        point_value = pool_value / total_points if total_points > 0 else 0.0
        values = [weight * point_value for weight in weights]

        return AllocationResult(
            code=procedure.code,
            point_count=procedure.point_count,
            value_sp=procedure.value_sp,
            value_sh=procedure.value_sh,
            value_tsp=procedure.value_tsp,
            surcharge_percent=procedure.surcharge_percent,
            assistant_count=procedure.assistant_count,
            anesthesia_enabled=procedure.anesthesia_enabled,
            sh_percentage=sh_percentage,
            sh_portion=sh_portion,
            adjusted_value_sh=adjusted_sh,
            adjusted_value_sp=adjusted_sp,
            anesthesia_value=anesthesia_value,
            pool_value=pool_value,
            point_value=point_value,
            surgeon_value=values[0],
            first_assistant_value=values[1],
            second_assistant_value=values[2],
            third_assistant_value=values[3],
            fourth_assistant_value=values[4],
            fifth_assistant_value=values[5],
            total_points=total_points,
            total_procedure_value=adjusted_sh + procedure.value_tsp + adjusted_sp,
            line_index=line_index,
            description=description,
        )

    def _role_weights(self, point_count: int, assistant_count: int) -> List[float]:
        """
        Get point weights of surgeon and the five assistants.

        Args:
            point_count: Points of the procedure
            assistant_count: Number of assistants taking part

        Returns:
            Six weights, surgeon first; absent assistants weigh 0
        """
        weights = [float(point_count)]
        for position, rate in enumerate(self.assistant_weights, start=1):
            weights.append(point_count * rate if assistant_count >= position else 0.0)
        return weights

    @staticmethod
    def _apply_surcharge(value: float, surcharge_percent: float) -> float:
        if surcharge_percent > 0:
            return value * (1 + surcharge_percent / 100)
        return value

    @staticmethod
    def _scale_sh(value_sh: float, percentages: Sequence[float], index: int) -> Tuple[float, float]:
        """Return (percentage applied, scaled SH) for the line at a 0-based index."""
        if len(percentages) > index:
            percentage = float(percentages[index])
            return percentage, value_sh * (percentage / 100)
        return 100.0, value_sh

    def _resolve_percentages(self, principal_code: str, percentage_table: Any) -> List[float]:
        """
        Look up the SH percentages of the principal procedure.

        Args:
            principal_code: Code of the principal procedure
            percentage_table: Object with get_percentages(), mapping, or None

        Returns:
            Ordered percentages, empty when the code is unknown
        """
        if percentage_table is None:
            return []
        if hasattr(percentage_table, 'get_percentages'):
            return list(percentage_table.get_percentages(principal_code))
        return [p for p in percentage_table.get(principal_code, []) if p > 0]

    @staticmethod
    def _describe(principal_code: str, percentage_table: Any) -> str:
        if percentage_table is not None and hasattr(percentage_table, 'describe'):
            return percentage_table.describe(principal_code)
        return ""

    def _aggregate(
        self,
        principal_code: str,
        results: List[AllocationResult],
        percentage_table: Any = None
    ) -> AggregateResult:
        """
        Sum per-line results into an aggregate.

        Args:
            principal_code: Code of the principal procedure
            results: Per-line allocation results
            percentage_table: Lookup used to describe the principal procedure

        Returns:
            AggregateResult with summed totals and display means
        """
        count = len(results) or 1

        def total(name: str) -> float:
            return sum(getattr(r, name) for r in results)

        adjusted_sh = total('adjusted_value_sh')
        adjusted_sp = total('adjusted_value_sp')
        value_tsp = total('value_tsp')

        return AggregateResult(
            principal_code=principal_code,
            lines=list(results),
            value_sh=total('sh_portion'),
            value_sp=total('value_sp'),
            value_tsp=value_tsp,
            adjusted_value_sh=adjusted_sh,
            adjusted_value_sp=adjusted_sp,
            anesthesia_value=total('anesthesia_value'),
            pool_value=total('pool_value'),
            point_value=total('point_value'),
            surgeon_value=total('surgeon_value'),
            first_assistant_value=total('first_assistant_value'),
            second_assistant_value=total('second_assistant_value'),
            third_assistant_value=total('third_assistant_value'),
            fourth_assistant_value=total('fourth_assistant_value'),
            fifth_assistant_value=total('fifth_assistant_value'),
            total_points=total('total_points'),
            total_procedure_value=adjusted_sh + value_tsp + adjusted_sp,
            point_count=total('point_count') / count,
            surcharge_percent=total('surcharge_percent') / count,
            assistant_count=total('assistant_count') / count,
            anesthesia_enabled=any(r.anesthesia_enabled for r in results),
            description=self._describe(principal_code, percentage_table),
        )


_default_calculator: Optional[FeeCalculator] = None


def _calculator() -> FeeCalculator:
    global _default_calculator
    if _default_calculator is None:
        _default_calculator = FeeCalculator()
    return _default_calculator


def compute_single_procedure(procedure: ProcedureInput) -> AllocationResult:
    """Calculate a single procedure with the default rates."""
    return _calculator().allocate(procedure)


def compute_multi_procedure(
    principal_code: str,
    lines: Sequence[Union[ProcedureInput, ProcedureLine]],
    percentage_table: Any = None
) -> AggregateResult:
    """Calculate several procedure lines with the default rates."""
    return _calculator().allocate_multiple(principal_code, lines, percentage_table)
