"""Command-line interface for checking values, declarations and data files
against validated-attribute rules.
"""
