"""Download archived LittleBigPlanet levels and write them as PS3 level backups."""

__version__ = "2.5.0"