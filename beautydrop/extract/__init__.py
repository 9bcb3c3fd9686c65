from .dom_extraction import extract_dom_records
from .html_signals import extract_html_signals
from .structured_extraction import extract_structured_records

__all__ = ["extract_dom_records", "extract_html_signals", "extract_structured_records"]
