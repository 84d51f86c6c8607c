"""Core interfaces/abstractions.

Why:
- Defines the contracts (Protocol) that concrete remote clients implement.
- Inverts dependencies: the core depends on abstractions only.
"""
