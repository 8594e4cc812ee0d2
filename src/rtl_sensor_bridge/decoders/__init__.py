"""Decoder process integration.

Submodules:
- rtl433: rtl_433 process supervision and JSON line decoding
"""

__all__: list[str] = []
