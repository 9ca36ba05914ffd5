"""form_builder - schema-driven form engine.

An operator publishes a form schema (title plus typed fields with validation
rules); clients render, validate and submit it without per-field code.
"""

__version__ = "0.1.0"
