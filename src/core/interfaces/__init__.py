"""Core interfaces/abstractions.

Why:
- Defines contracts (Protocol) implemented by concrete adapters.
- Resource clients depend on the contract, not on `MochiClient` itself.
"""
