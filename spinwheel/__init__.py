"""Spin-the-wheel session engine with reward and elimination modes."""
