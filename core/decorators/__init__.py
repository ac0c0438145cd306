"""
Core decorators package
"""

from .error_handling import report_error_handler

__all__ = ['report_error_handler']
