"""
Application Modules.

- cli/: Command-line entry point, argument classification, daemon HTTP client
- core/: Configuration, logging, exceptions
- plugin/: Parameter values, request encoding, response interpretation
- schemas/: Pydantic models for tool options and check results
- settings/: Built-in YAML defaults
"""
