"""
SUS procedure table: per-line SH percentages and suggested assistants.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional, Union, Iterable
import logging

import pandas as pd


PERCENTAGE_COLUMNS = ['linha1', 'linha2', 'linha3', 'linha4', 'linha5']
TABLE_COLUMNS = ['codigo', 'descricao'] + PERCENTAGE_COLUMNS + ['auxiliares']

# Lines allowed when the principal procedure is not in the table
DEFAULT_MAX_LINES = len(PERCENTAGE_COLUMNS)

DEFAULT_TABLE_PATH = Path(__file__).resolve().parent.parent / 'data' / 'procedimentos.csv'


@dataclass(frozen=True)
class ProcedureInfo:
    """One row of the procedure table."""
    code: str
    description: str = ""
    percentages: List[float] = field(default_factory=list)
    suggested_assistants: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'code': self.code,
            'description': self.description,
            'percentages': list(self.percentages),
            'suggested_assistants': self.suggested_assistants,
        }


class ProcedureTable:
    """Read-only lookup of procedures by code."""

    def __init__(self, data: pd.DataFrame, config: Dict[str, Any] = None):
        """
        Initialize procedure table.

        Args:
            data: DataFrame with the columns of TABLE_COLUMNS
            config: Configuration dictionary
        """
        self.config = config or {}
        self.logger = logging.getLogger(f"dattra.{self.__class__.__name__}")

        missing = [col for col in TABLE_COLUMNS if col not in data.columns]
        if missing:
            raise ValueError(f"Procedure table is missing columns: {', '.join(missing)}")

        self._procedures: Dict[str, ProcedureInfo] = {}
        for row in self._normalize(data).itertuples(index=False):
            percentages = [float(getattr(row, col)) for col in PERCENTAGE_COLUMNS]
            self._procedures[row.codigo] = ProcedureInfo(
                code=row.codigo,
                description=row.descricao,
                percentages=[p for p in percentages if p > 0],
                suggested_assistants=int(row.auxiliares),
            )

        self.logger.debug(f"Loaded {len(self._procedures)} procedures")

    @classmethod
    def from_csv(cls, file_path: Union[str, Path] = None, config: Dict[str, Any] = None) -> 'ProcedureTable':
        """
        Load the table from a CSV file.

        Args:
            file_path: CSV path (defaults to the bundled table)
            config: Configuration dictionary

        Returns:
            ProcedureTable instance
        """
        file_path = Path(file_path) if file_path else DEFAULT_TABLE_PATH

        if not file_path.exists():
            error_msg = f"Procedure table not found: {file_path}"
            logging.getLogger(f"dattra.{cls.__name__}").error(error_msg)
            raise FileNotFoundError(error_msg)

        data = pd.read_csv(file_path, dtype={'codigo': str}, encoding='utf-8')
        return cls(data, config)

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]], config: Dict[str, Any] = None) -> 'ProcedureTable':
        """Build the table from dictionaries keyed like TABLE_COLUMNS."""
        data = pd.DataFrame(list(records))
        for col in TABLE_COLUMNS:
            if col not in data.columns:
                data[col] = 0 if col in PERCENTAGE_COLUMNS + ['auxiliares'] else ""
        return cls(data, config)

    @staticmethod
    def _normalize(data: pd.DataFrame) -> pd.DataFrame:
        out = data[TABLE_COLUMNS].copy()
        out['codigo'] = out['codigo'].astype(str).str.strip()
        out['descricao'] = out['descricao'].fillna("").astype(str).str.strip()
        numeric = PERCENTAGE_COLUMNS + ['auxiliares']
        out[numeric] = out[numeric].apply(pd.to_numeric, errors='coerce').fillna(0)
        return out

    def __len__(self) -> int:
        return len(self._procedures)

    def __contains__(self, code: str) -> bool:
        return code in self._procedures

    def get_procedure(self, code: str) -> Optional[ProcedureInfo]:
        """Get a procedure by its formatted code, or None when unknown."""
        return self._procedures.get(code)

    def get_percentages(self, code: str) -> List[float]:
        """
        Get the SH percentages configured for each line under a principal procedure.

        Args:
            code: Principal procedure code

        Returns:
            Non-zero percentages in line order, empty when the code is unknown
        """
        procedure = self._procedures.get(code)
        if procedure is None:
            return []
        return list(procedure.percentages)

    def max_lines(self, code: Optional[str]) -> int:
        """Number of lines allowed under a principal procedure."""
        if not code:
            return DEFAULT_MAX_LINES
        procedure = self._procedures.get(code)
        if procedure is None:
            return DEFAULT_MAX_LINES
        return len(procedure.percentages)

    def suggested_assistants(self, code: str) -> int:
        procedure = self._procedures.get(code)
        return procedure.suggested_assistants if procedure else 0

    def describe(self, code: str) -> str:
        procedure = self._procedures.get(code)
        return procedure.description if procedure else ""

    def search(self, text: str, limit: int = 20) -> List[ProcedureInfo]:
        """
        Find procedures whose code or description contains the text.

        Args:
            text: Case-insensitive search text
            limit: Maximum number of matches

        Returns:
            Matching procedures in table order
        """
        needle = text.strip().lower()
        if not needle:
            return []

        digits = ''.join(ch for ch in needle if ch.isdigit())
        matches = []
        for procedure in self._procedures.values():
            plain_code = procedure.code.replace('.', '').replace('-', '')
            if (needle in procedure.code or needle in procedure.description.lower()
                    or (digits and digits in plain_code)):
                matches.append(procedure)
                if len(matches) >= limit:
                    break
        return matches

    def to_dataframe(self) -> pd.DataFrame:
        """Get the table as a DataFrame for display."""
        rows = []
        for procedure in self._procedures.values():
            row = {'codigo': procedure.code, 'descricao': procedure.description}
            for i, col in enumerate(PERCENTAGE_COLUMNS):
                row[col] = procedure.percentages[i] if i < len(procedure.percentages) else 0.0
            row['auxiliares'] = procedure.suggested_assistants
            rows.append(row)
        return pd.DataFrame(rows, columns=TABLE_COLUMNS)
