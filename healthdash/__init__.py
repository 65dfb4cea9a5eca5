"""Core (UI-agnostic) health spending dashboard logic.

This package contains:
- data loading and reshaping (CSV -> pandas) plus the combined-table join
- the plottable indicator registry
- filter normalization and table queries
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
