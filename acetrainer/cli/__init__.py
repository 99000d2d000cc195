"""
Delivery layer: Typer/Rich terminal interface.
"""
