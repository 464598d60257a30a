"""
Core models, validators and rule engine for the import pipeline.
"""
