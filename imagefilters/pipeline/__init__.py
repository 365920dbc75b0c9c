from .filter_pipeline import apply_by_name, apply_filter, parse_filter_chain

__all__ = ["apply_by_name", "apply_filter", "parse_filter_chain"]
