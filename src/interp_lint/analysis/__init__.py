from interp_lint.analysis.dollar_brace import LocationError
from interp_lint.analysis.engine import analyze_tree
from interp_lint.analysis.locator import locate_interpolated_strings
from interp_lint.analysis.validation import MalformedTreeError

__all__ = ["LocationError", "MalformedTreeError", "analyze_tree", "locate_interpolated_strings"]
