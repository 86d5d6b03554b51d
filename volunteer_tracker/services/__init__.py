"""
Service layer: record operations, spreadsheet sync, offline replay and export.
"""
