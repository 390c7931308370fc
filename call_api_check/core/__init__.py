"""
Core Infrastructure.

Configuration, logging and the exception hierarchy shared by the CLI
and the plugin protocol modules.
"""
