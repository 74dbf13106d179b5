"""
WireLab - Interactive Wireless Communications Lab

Production modules:
- engine: numeric/physics models (Erlang traffic, handoff, Doppler,
  multipath, signal recovery, frequency reuse, modulation)
- ui: PyQt6 user interface
"""

__version__ = "1.0.0"
