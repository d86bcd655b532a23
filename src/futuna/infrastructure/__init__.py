"""
Infrastructure Layer

Database, language model and utility adapters.
"""
