"""
Report renderers for computed fee results.
"""

from .base_renderer import BaseRenderer
from .html_renderer import HTMLReportRenderer
from .csv_renderer import CSVReportRenderer

__all__ = ['BaseRenderer', 'HTMLReportRenderer', 'CSVReportRenderer']
