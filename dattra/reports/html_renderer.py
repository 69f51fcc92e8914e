"""
Printable HTML report of a fee calculation.
"""

from datetime import datetime
from typing import Dict, Any, List

from jinja2 import Environment, PackageLoader, select_autoescape

from .base_renderer import BaseRenderer, Result
from ..fees.models import AggregateResult
from ..utils.currency import format_currency


def format_datetime(value: datetime) -> str:
    """Format a timestamp as dd/mm/yyyy hh:mm."""
    return value.strftime("%d/%m/%Y %H:%M")


class HTMLReportRenderer(BaseRenderer):
    """Render results as an HTML page ready to print or save as PDF."""

    TEMPLATE_NAME = 'report.html'

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize HTML renderer.

        Args:
            config: Configuration dictionary
        """
        super().__init__(config)
        self.organization = self.config.get('organization', 'DATTRA')

        self.env = Environment(
            loader=PackageLoader('dattra', 'templates'),
            autoescape=select_autoescape(['html']),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters['currency'] = format_currency
        self.env.filters['datetime'] = format_datetime

    def get_file_extension(self) -> str:
        return '.html'

    def render(self, result: Result) -> str:
        """
        Render the report page.

        Every amount shown comes from the result fields; the only derived
        figure is the display sum of the 2nd to 5th assistants.

        Args:
            result: Single or multi-procedure result

        Returns:
            HTML document
        """
        is_multiple = isinstance(result, AggregateResult)

        context = {
            'result': result,
            'is_multiple': is_multiple,
            'lines': result.lines if is_multiple else [],
            'other_assistants_value': self._other_assistants(result),
            'line_other_assistants': [self._other_assistants(line) for line in result.lines] if is_multiple else [],
            'line_badges': [self._line_badges(line) for line in result.lines] if is_multiple else [],
            'badges': self._badges(result, is_multiple),
            'organization': self.organization,
            'generated_at': datetime.now(),
        }

        html = self.env.get_template(self.TEMPLATE_NAME).render(**context)
        self.logger.debug(f"Rendered report for {result.code}")
        return html

    @staticmethod
    def _other_assistants(result: Any) -> float:
        return sum(result.assistant_values[1:])

    @staticmethod
    def _line_badges(line: Any) -> List[Dict[str, str]]:
        """Settings of one procedure line, with its own values rather than the means."""
        badges = []
        if line.anesthesia_enabled:
            badges.append({'css': 'badge-anestesia', 'icon': '💉', 'label': 'Anestesia'})
        if line.surcharge_percent > 0:
            badges.append({'css': 'badge-incremento', 'icon': '%', 'label': f"{line.surcharge_percent}%"})
        if line.assistant_count > 0:
            badges.append({'css': 'badge-auxiliar', 'icon': '👥', 'label': f"{line.assistant_count} Aux"})
        return badges

    @staticmethod
    def _badges(result: Result, is_multiple: bool) -> List[Dict[str, str]]:
        """Active configuration badges shown at the end of the report."""
        badges = []
        if result.anesthesia_enabled:
            badges.append({'css': 'badge-anestesia', 'icon': '💉', 'label': 'Anestesia'})
        if result.surcharge_percent > 0:
            badges.append({'css': 'badge-incremento', 'icon': '%',
                           'label': f"Incremento {result.surcharge_percent:.1f}%"})
        if is_multiple:
            badges.append({'css': 'badge-multiplos', 'icon': '📋', 'label': 'Múltiplos Procedimentos'})
        assistants = round(result.assistant_count)
        if assistants > 0:
            label = 'Auxiliar' if assistants == 1 else 'Auxiliares'
            badges.append({'css': 'badge-auxiliar', 'icon': '👥', 'label': f"{assistants} {label}"})
        return badges
