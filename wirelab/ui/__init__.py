# wirelab/ui/__init__.py
"""
UI Package - PyQt6 Presentation Layer

This package renders the engine models and owns their timers.

Architecture
------------
The UI follows a clean separation pattern:
- wirelab/engine/ : Numeric models (no Qt imports)
- wirelab/ui/     : Visualization and user interaction

Modules
-------
config.py : Centralized constants and configuration
core/system.py : Controller owning one engine instance per lab and its QTimers
widgets/charts/ : One panel per lab (trunking, handoff, Doppler, ...)
main_dashboard.py : Tabbed main window and application entry point

Data Flow
---------
1. SimulationController timers call engine ``advance(dt)``
2. Controller emits the read-only snapshot through a Qt signal
3. Panels redraw from the snapshot; they never mutate engine state

Dependencies
------------
- PyQt6 : GUI framework
- pyqtgraph : High-performance plotting
- qtawesome : Icons
- numpy : Numerical processing
"""
