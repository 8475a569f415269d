"""Source adapters."""

from ski_conditions.adapters.base import BaseAdapter
from ski_conditions.adapters.metroparks import MetroparksAdapter
from ski_conditions.adapters.nordic_ski_racer import NordicSkiRacerAdapter
from ski_conditions.adapters.nubs_nob import NubsNobAdapter

__all__ = ["BaseAdapter", "MetroparksAdapter", "NordicSkiRacerAdapter", "NubsNobAdapter"]
