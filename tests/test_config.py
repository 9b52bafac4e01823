"""
Test suite for package configuration and utilities.

Tests cover:
- Default values and reset
- temp_config restore semantics
- Timer logging
- Error hierarchy
"""

import logging

import pytest
import titansim
from titansim import (config, temp_config, TitanSimError, ConfigurationError,
                      InputValidationError, NumericalError)
from titansim.utils import Timer, as_vector_array


class TestConfig:
    """Test global configuration object."""

    def test_defaults(self):
        assert config.G == 6.674e-11
        assert config.EARTH_KEY == 'earth'
        assert config.DEFAULT_PROBE_MASS == 15000.0
        assert config.DEFAULT_INTEGRATOR == 'rk4'

    def test_reset(self):
        config.DEFAULT_MAX_STEP = 1.0
        try:
            config.reset()
            assert config.DEFAULT_MAX_STEP == 1000.0
        finally:
            config.reset()

    def test_temp_config_restores(self):
        with temp_config(G=1.0, DEFAULT_INTEGRATOR='verlet') as cfg:
            assert cfg.G == 1.0
            assert titansim.config.DEFAULT_INTEGRATOR == 'verlet'
        assert config.G == 6.674e-11
        assert config.DEFAULT_INTEGRATOR == 'rk4'

    def test_temp_config_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with temp_config(DEFAULT_MAX_STEP=5.0):
                raise RuntimeError("boom")
        assert config.DEFAULT_MAX_STEP == 1000.0

    def test_temp_config_invalid_key(self):
        with pytest.raises(AttributeError, match="no attribute 'NOT_A_SETTING'"):
            with temp_config(NOT_A_SETTING=1):
                pass

    def test_repr(self):
        text = repr(config)
        assert text.startswith("TitanSimConfig:")
        assert "DEFAULT_MAX_STEP" in text


class TestUtils:
    """Test helper utilities."""

    def test_timer_records_elapsed(self):
        with Timer(verbose=False) as t:
            sum(range(1000))
        assert t.elapsed is not None
        assert t.elapsed >= 0

    def test_timer_logs(self, caplog):
        with caplog.at_level(logging.INFO, logger='titansim.utils'):
            with Timer("Propagation"):
                pass
        assert "Propagation:" in caplog.text

    def test_as_vector_array(self):
        assert as_vector_array([1, 2, 3]).tolist() == [1.0, 2.0, 3.0]
        with pytest.raises(ValueError, match="finite"):
            as_vector_array([1, float('nan'), 3], "v0")


class TestErrors:
    """Test the exception hierarchy."""

    @pytest.mark.parametrize("error_class", [ConfigurationError, InputValidationError])
    def test_value_errors(self, error_class):
        assert issubclass(error_class, TitanSimError)
        assert issubclass(error_class, ValueError)

    def test_numerical_error(self):
        err = NumericalError("singular", pairs=[(0, 1)])
        assert isinstance(err, ArithmeticError)
        assert isinstance(err, TitanSimError)
        assert err.pairs == [(0, 1)]
        assert NumericalError("x").pairs == []
