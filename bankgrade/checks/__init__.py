"""Passive security checks producing raw scanner results."""
