"""
Local calculation history stored as a JSON file.
"""

import json
from pathlib import Path
from typing import Dict, Any, List, Union, Optional
import logging
from datetime import datetime

import pandas as pd

from ..fees.models import AllocationResult, AggregateResult


class HistoryStore:
    """Append, list and clear calculation results, most recent first."""

    # Flat columns written by export_csv, in order; SH and SP are the surcharged amounts
    CSV_COLUMNS = [
        'timestamp', 'kind', 'code', 'description', 'lines',
        'point_count', 'surcharge_percent', 'assistant_count', 'anesthesia_enabled',
        'adjusted_value_sh', 'value_tsp', 'adjusted_value_sp',
        'anesthesia_value', 'pool_value', 'surgeon_value',
        'first_assistant_value', 'second_assistant_value', 'third_assistant_value',
        'fourth_assistant_value', 'fifth_assistant_value',
        'total_points', 'total_procedure_value',
    ]

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize history store.

        Args:
            config: Configuration dictionary
        """
        self.config = config or {}
        self.logger = logging.getLogger(f"dattra.{self.__class__.__name__}")

        self.history_file = Path(self.config.get('history_file', 'data/historico.json'))
        self.max_entries = self.config.get('max_entries', 500)

    def append(self, result: Union[AllocationResult, AggregateResult, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Save a result at the top of the history.

        Args:
            result: Computed result (or an already serialized record)

        Returns:
            The stored record
        """
        record = self._to_record(result)

        history = self.read_all()
        history.insert(0, record)
        if self.max_entries:
            history = history[:self.max_entries]

        try:
            self.history_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.history_file, 'w', encoding='utf-8') as f:
                json.dump(history, f, indent=2, ensure_ascii=False)
            self.logger.info(f"Saved {record['kind']} calculation {record.get('code', '')} to history")
        except OSError as e:
            self.logger.error(f"Error saving to history: {str(e)}")

        return record

    def read_all(self) -> List[Dict[str, Any]]:
        """
        Get every saved result, most recent first.

        Returns:
            List of records, empty when there is no history or it cannot be read
        """
        if not self.history_file.exists():
            return []

        try:
            with open(self.history_file, 'r', encoding='utf-8') as f:
                history = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.error(f"Error reading history: {str(e)}")
            return []

        if not isinstance(history, list):
            self.logger.error(f"Unexpected history format in {self.history_file}")
            return []
        return history

    def clear(self):
        """Remove every saved result."""
        try:
            if self.history_file.exists():
                self.history_file.unlink()
            self.logger.info("History cleared")
        except OSError as e:
            self.logger.error(f"Error clearing history: {str(e)}")

    def __len__(self) -> int:
        return len(self.read_all())

    def to_dataframe(self) -> pd.DataFrame:
        """Get the history as a flat table, one row per record."""
        rows = []
        for record in self.read_all():
            row = {column: record.get(column) for column in self.CSV_COLUMNS}
            row['lines'] = len(record.get('lines') or []) or 1
            rows.append(row)
        return pd.DataFrame(rows, columns=self.CSV_COLUMNS)

    def export_csv(self, output_path: Optional[Union[str, Path]] = None) -> Path:
        """
        Export the history to a CSV file.

        Args:
            output_path: Output file (if None, generates a timestamp-based name)

        Returns:
            Path to saved file
        """
        if output_path is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            output_path = self.history_file.parent / f"historico_{timestamp}.csv"

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        self.to_dataframe().to_csv(output_path, index=False, encoding='utf-8')
        self.logger.info(f"Exported history to: {output_path}")
        return output_path

    @staticmethod
    def _to_record(result: Union[AllocationResult, AggregateResult, Dict[str, Any]]) -> Dict[str, Any]:
        if isinstance(result, dict):
            record = dict(result)
            record.setdefault('kind', 'multiple' if record.get('lines') else 'single')
            record.setdefault('timestamp', datetime.now().isoformat())
            return record

        record = result.to_dict()
        if isinstance(result, AggregateResult):
            record['kind'] = 'multiple'
            record['code'] = result.principal_code
        else:
            record['kind'] = 'single'
        return record
