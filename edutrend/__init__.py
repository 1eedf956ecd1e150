"""Core (UI-agnostic) completion-rate trend logic.

This package contains:
- data loading (CSV -> pandas) with malformed-row rejection
- selection normalization
- series selection, least-squares trend fit and projection
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
