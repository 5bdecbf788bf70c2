"""Core (UI-agnostic) track dashboard logic.

This package contains:
- data loading (CSV -> pandas) and row normalization
- filter criteria, the filter engine and the search debouncer
- table helpers (sorting, pagination) and CSV export
- summary payloads (KPIs + Altair -> Vega-Lite spec dict)
"""
