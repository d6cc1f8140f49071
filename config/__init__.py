"""Configuration package.

- config.py: configuration dataclasses and the layered loader
- service.py: facade for flat access
- numbers.json: spoken number words per language
"""
