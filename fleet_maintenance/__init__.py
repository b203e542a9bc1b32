"""
Fleet Maintenance Engine

Predictive maintenance, analytics and optimization for truck fleets.
"""

__version__ = "1.0.0"
