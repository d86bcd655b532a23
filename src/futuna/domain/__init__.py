"""
Domain Layer

Business entities, payload models and the pipeline error taxonomy.
"""
