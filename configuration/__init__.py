"""
Class configuration engine
configuration/

- marks  — marks rules per effective subject type
- copier — best-effort copy of a class's subject configuration
"""
