"""
Infrastructure services - LLM access and response parsing
"""
