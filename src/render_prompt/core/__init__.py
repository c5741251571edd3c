"""Core rendering library (no CLI or process concerns)."""
