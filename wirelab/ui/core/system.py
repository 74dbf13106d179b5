"""
Simulation Controller

Central controller that owns one engine instance per lab and the Qt
timers that drive the timed ones:

- Trunking occupancy simulator (200 ms tick)
- Handoff drive (100 ms tick)
- Doppler car and multipath receiver (50 ms animation frame)
- Signal recovery pipeline (advanced on demand, no timer)

Single source of truth: panels receive snapshots through signals and
send parameter changes back through the controller's setters.

Data Flow:
----------
1. QTimer fires → engine.advance(dt)
2. Snapshot emitted on the lab's signal
3. Panels redraw
"""

import logging

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from wirelab.engine import (
    DopplerAnimation, HandoffConfig, HandoffController, MultipathScene,
    OccupancySimulator, PipelineStage, SignalRecoveryPipeline, TrafficParameters,
)
from wirelab.ui.config import (
    FRAME_DT, FRAME_REFRESH_MS, HANDOFF_DT, HANDOFF_REFRESH_MS,
    OCCUPANCY_DT, OCCUPANCY_REFRESH_MS,
)

logger = logging.getLogger(__name__)


class SimulationController(QObject):
    """
    Main controller coordinating the engine models and the UI.

    Architecture:
    -------------
    QTimer ──► engine.advance(dt) ──► snapshot signal ──► panel

    Parameter errors raised by an engine stop the affected timer and are
    reported on ``error_occurred``; the engine keeps its previous state.
    """
    # Signals for UI updates
    occupancy_updated = pyqtSignal(object)      # OccupancyState
    traffic_changed = pyqtSignal(object)        # TrafficParameters
    handoff_updated = pyqtSignal(object)        # HandoffState
    doppler_updated = pyqtSignal(object)        # DopplerFrame
    multipath_updated = pyqtSignal(object)      # PowerDelayProfile
    recovery_updated = pyqtSignal(object)       # RecoveryPipelineState
    error_occurred = pyqtSignal(str, str)       # lab, message

    def __init__(self, seed=None, parent=None):
        super().__init__(parent)

        self.occupancy = OccupancySimulator(seed=seed)
        self.handoff = HandoffController(seed=seed)
        self.doppler = DopplerAnimation()
        self.multipath = MultipathScene()
        self.recovery = SignalRecoveryPipeline(seed=seed)

        self.occupancy_timer = QTimer(self)
        self.occupancy_timer.setInterval(OCCUPANCY_REFRESH_MS)
        self.occupancy_timer.timeout.connect(self.tick_occupancy)

        self.handoff_timer = QTimer(self)
        self.handoff_timer.setInterval(HANDOFF_REFRESH_MS)
        self.handoff_timer.timeout.connect(self.tick_handoff)

        self.frame_timer = QTimer(self)
        self.frame_timer.setInterval(FRAME_REFRESH_MS)
        self.frame_timer.timeout.connect(self.tick_frame)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start_system(self):
        """Start the animation frame; trunking and handoff wait for Play."""
        if not self.frame_timer.isActive():
            self.frame_timer.start()
        logger.info("Simulation controller started")

    def stop_system(self):
        for timer in (self.occupancy_timer, self.handoff_timer, self.frame_timer):
            timer.stop()
        self.handoff.stop()
        logger.info("Simulation controller stopped")

    def _report(self, lab: str, exc: Exception):
        logger.error("%s: %s", lab, exc)
        self.error_occurred.emit(lab, str(exc))

    # =========================================================================
    # Trunking
    # =========================================================================

    def set_traffic(self, channels: int, arrival_rate: float, service_rate: float):
        try:
            params = TrafficParameters(channels, arrival_rate, service_rate)
        except ValueError as e:
            self._report("trunking", e)
            return
        self.occupancy.set_parameters(params)
        self.traffic_changed.emit(params)
        self.occupancy_updated.emit(self.occupancy.state)

    def start_occupancy(self):
        self.occupancy_timer.start()
        logger.info("Occupancy simulation started")

    def stop_occupancy(self):
        self.occupancy_timer.stop()
        logger.info("Occupancy simulation paused")

    def reset_occupancy(self):
        self.occupancy.reset()
        self.occupancy_updated.emit(self.occupancy.state)

    def tick_occupancy(self):
        # Fast rates would push the per-tick probabilities past 1
        dt = min(OCCUPANCY_DT, self.occupancy.max_stable_dt())
        if dt < OCCUPANCY_DT:
            logger.debug("Occupancy step shortened to %.4f s (requested %.2f s)", dt, OCCUPANCY_DT)
        try:
            state = self.occupancy.advance(dt)
        except ValueError as e:
            self.occupancy_timer.stop()
            self._report("trunking", e)
            return
        self.occupancy_updated.emit(state)

    # =========================================================================
    # Handoff
    # =========================================================================

    def set_handoff_config(self, config: HandoffConfig):
        self.handoff.set_config(config)
        self.handoff_updated.emit(self.handoff.state)

    def start_handoff(self):
        self.handoff.start()
        if self.handoff.moving:
            self.handoff_timer.start()
        self.handoff_updated.emit(self.handoff.state)

    def stop_handoff(self):
        self.handoff.stop()
        self.handoff_timer.stop()
        self.handoff_updated.emit(self.handoff.state)

    def reset_handoff(self):
        self.handoff_timer.stop()
        self.handoff.reset()
        self.handoff_updated.emit(self.handoff.state)

    def tick_handoff(self):
        state = self.handoff.advance(HANDOFF_DT)
        if not state.moving:
            self.handoff_timer.stop()
        self.handoff_updated.emit(state)

    # =========================================================================
    # Doppler + multipath animation
    # =========================================================================

    def set_doppler(self, velocity_kmh: float, carrier_freq_ghz: float):
        try:
            self.doppler.set_velocity(velocity_kmh)
            self.doppler.set_carrier(carrier_freq_ghz)
        except ValueError as e:
            self._report("doppler", e)

    def tick_frame(self):
        try:
            frame = self.doppler.advance(FRAME_DT)
        except ValueError as e:
            self._report("doppler", e)
        else:
            self.doppler_updated.emit(frame)
        self.multipath_updated.emit(self.multipath.advance())

    # =========================================================================
    # Signal recovery
    # =========================================================================

    def configure_recovery(self, bits: str, samples_per_symbol: int, noise_variance: float):
        """Reset the pipeline with new inputs."""
        self.recovery.reset()
        try:
            self.recovery.set_bits(bits, samples_per_symbol)
            self.recovery.set_noise_variance(noise_variance)
        except ValueError as e:
            self._report("recovery", e)
        self.recovery_updated.emit(self.recovery.state)

    def advance_recovery(self):
        try:
            state = self.recovery.advance()
        except RuntimeError as e:
            self._report("recovery", e)
            return
        self.recovery_updated.emit(state)

    def reset_recovery(self):
        self.recovery.reset()
        self.recovery_updated.emit(self.recovery.state)

    def finish_recovery(self):
        """Run every remaining stage."""
        if self.recovery.stage is PipelineStage.COMPLETE:
            return
        self.recovery_updated.emit(self.recovery.run_to_end())
