"""
Core Business Logic
==================

Modules:
- tools: Tool registry, parameter models and dispatch
- backends: Mock and live ads backends
- currency: Minor/major currency unit conversion
- reshape: SDK response field renaming
- errors: Tool error kinds
"""
