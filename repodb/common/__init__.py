"""
Common modules package: errors, logging and configuration
"""
