"""
Core application components including configuration, the injected clock
and custom exceptions.
"""
