"""
SME Financial Calculators

Calculation engine and HTTP API for small-business financial decisions.
"""
