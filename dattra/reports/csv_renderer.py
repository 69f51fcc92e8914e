"""
Spreadsheet export of a fee calculation.
"""

from typing import List

import pandas as pd

from .base_renderer import BaseRenderer, Result
from ..fees.models import AllocationResult, AggregateResult


class CSVReportRenderer(BaseRenderer):
    """Render a result as CSV, one row per procedure line plus a total row."""

    COLUMNS = {
        'line_index': 'Linha',
        'code': 'Código',
        'description': 'Descrição',
        'sh_percentage': '% SH',
        'point_count': 'Pontos',
        'surcharge_percent': 'Incremento (%)',
        'assistant_count': 'Auxiliares',
        'adjusted_value_sh': 'Valor SH',
        'value_tsp': 'Valor TSP',
        'adjusted_value_sp': 'Valor SP',
        'anesthesia_value': 'Anestesia',
        'surgeon_value': 'Cirurgião',
        'first_assistant_value': '1º Auxiliar',
        'second_assistant_value': '2º Auxiliar',
        'third_assistant_value': '3º Auxiliar',
        'fourth_assistant_value': '4º Auxiliar',
        'fifth_assistant_value': '5º Auxiliar',
        'total_points': 'Total Pontos',
        'total_procedure_value': 'Valor Total',
    }

    def get_file_extension(self) -> str:
        return '.csv'

    def to_dataframe(self, result: Result) -> pd.DataFrame:
        """
        Build the table of a result.

        Args:
            result: Single or multi-procedure result

        Returns:
            DataFrame with labelled columns; multi-procedure results end with a TOTAL row
        """
        if isinstance(result, AggregateResult):
            rows = [self._row(line) for line in result.lines]
            total = self._row(result)
            total.update({'line_index': 'TOTAL', 'code': result.principal_code, 'sh_percentage': None})
            rows.append(total)
        else:
            rows = [self._row(result)]
            rows[0]['line_index'] = 1

        df = pd.DataFrame(rows, columns=list(self.COLUMNS))
        return df.rename(columns=self.COLUMNS)

    def render(self, result: Result) -> str:
        return self.to_dataframe(result).to_csv(index=False, sep=self.config.get('csv_separator', ';'),
                                                decimal=self.config.get('csv_decimal', ','))

    def _row(self, result: Result) -> dict:
        row = {column: getattr(result, column, None) for column in self.COLUMNS}
        if not isinstance(result, AllocationResult):
            row['sh_percentage'] = None
        return row

    @classmethod
    def column_labels(cls) -> List[str]:
        return list(cls.COLUMNS.values())
