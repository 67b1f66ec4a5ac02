"""Core infrastructure for stackctl: settings, logging and the error hierarchy.
"""
