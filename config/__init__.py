"""Configuration package for targetcopy.

All constants live in `config.settings`; import them from there.
"""
