# arvi_habits/__init__.py
"""
arvi-habits: habit series generation with a fixed three-pass AI pipeline.

creative (Gemini) -> structure (Gemini) -> JSON normalization (OpenAI),
then strict validation and persistence.
"""

__version__ = "0.1.0"
