"""
Chart panels for the WireLab dashboard, one per lab.
"""

from .trunking import TrunkingPanel
from .handoff import HandoffPanel
from .doppler import DopplerPanel
from .multipath import MultipathPanel
from .recovery import RecoveryPanel
from .reuse import ReusePanel
from .modulation import ModulationPanel

__all__ = [
    'TrunkingPanel',
    'HandoffPanel',
    'DopplerPanel',
    'MultipathPanel',
    'RecoveryPanel',
    'ReusePanel',
    'ModulationPanel',
]
