"""
Common modules: configuration, environment checks, logging, shell execution
"""
