"""
TitanSim: N-body Solar System and Probe Trajectory Simulation

A Python package for integrating the Solar System together with a probe
launched from Earth, using fixed-step Runge-Kutta or Verlet stepping.
"""

import logging

# Core classes
from .vector import Vector3d
from .bodies import Body, Probe, Catalog
from .state import SystemState, Rate
from .field import GravityField
from .solver import Solver, Integrator, RK4Integrator, VerletIntegrator
from .history import SimulationHistory
from .simulator import ProbeSimulator

# Errors
from .errors import (TitanSimError, ConfigurationError,
                     InputValidationError, NumericalError)

# Configuration
from .config import config, temp_config

# Default catalog
from .defaults import SOLAR_SYSTEM, solar_system_2020

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Package metadata
__version__ = "0.1.0"

# Define what gets imported with "from titansim import *"
__all__ = [
    # Classes
    "Vector3d",
    "Body",
    "Probe",
    "Catalog",
    "SystemState",
    "Rate",
    "GravityField",
    "Solver",
    "Integrator",
    "RK4Integrator",
    "VerletIntegrator",
    "SimulationHistory",
    "ProbeSimulator",
    # Errors
    "TitanSimError",
    "ConfigurationError",
    "InputValidationError",
    "NumericalError",
    # Configuration
    "config",
    "temp_config",
    # Catalog
    "SOLAR_SYSTEM",
    "solar_system_2020",
]
