"""
Base renderer class providing common interface for all report renderers.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Any, Optional, Union
import logging
from pathlib import Path

from ..fees.models import AllocationResult, AggregateResult

Result = Union[AllocationResult, AggregateResult]


class BaseRenderer(ABC):
    """Abstract base class for all report renderers."""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize the renderer with configuration.

        Args:
            config: Configuration dictionary for the renderer
        """
        self.config = config or {}
        self.logger = logging.getLogger(f"dattra.{self.__class__.__name__}")

        self.output_dir = Path(self.config.get('output_dir', 'output'))

    @abstractmethod
    def render(self, result: Result) -> str:
        """
        Render a computed result.

        Args:
            result: Single or multi-procedure result, read only

        Returns:
            Rendered document
        """
        pass

    @abstractmethod
    def get_file_extension(self) -> str:
        """
        Get the file extension of rendered documents.

        Returns:
            Extension including the dot
        """
        pass

    def save(self, result: Result, output_file: Optional[Union[str, Path]] = None) -> Path:
        """
        Render a result and write it to a file.

        Args:
            result: Result to render
            output_file: Output path (if None, generates a name in output_dir)

        Returns:
            Path to saved file
        """
        if output_file is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            code = result.code.replace('.', '').replace('-', '') or 'procedimento'
            output_path = self.output_dir / f"calculo_{code}_{timestamp}{self.get_file_extension()}"
        else:
            output_path = Path(output_file)

        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(output_path, 'w', encoding='utf-8', newline='') as f:
                f.write(self.render(result))
        except OSError as e:
            self.logger.error(f"Error saving report: {str(e)}")
            raise

        self.logger.info(f"Saved report to: {output_path}")
        return output_path
