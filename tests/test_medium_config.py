import numpy as np
import pytest

from bornsim.core.config import SolverOptions, default_pixel_size
from bornsim.core.grid import Grid2D, extract
from bornsim.core.medium import SampleMedium, center_permittivity
from bornsim.errors import ConfigurationError


def test_from_permittivity_pads_edges():
    e_r = np.array([[1.0, 2.0], [3.0, 4.0]])
    m = SampleMedium.from_permittivity(e_r, pixel_size=0.25, boundary_widths=(1, 2))

    assert m.grid.shape == (4, 6)
    assert m.roi_shape == (2, 2)
    assert m.boundary_widths == (1, 2)
    np.testing.assert_array_equal(extract(m.e_r, m.roi), e_r)
    assert m.e_r[0, 0] == 1.0
    assert m.e_r[-1, -1] == 4.0
    assert m.e_r_center == pytest.approx(2.5)


def test_center_permittivity_uses_real_part():
    e_r = np.array([[1.0 + 0.5j, 2.0], [1.5, 3.0 + 1.0j]])
    assert center_permittivity(e_r) == pytest.approx(2.0)


def test_medium_shape_mismatch():
    g = Grid2D(nx=4, ny=4, pixel_size=1.0)
    with pytest.raises(ConfigurationError):
        SampleMedium(e_r=np.ones((3, 4)), e_r_center=1.0, grid=g, roi=g.roi_slices((0, 0)))
    with pytest.raises(ConfigurationError):
        SampleMedium.from_permittivity(np.ones(4), pixel_size=1.0)


def test_options_defaults():
    opts = SolverOptions()
    assert opts.wavelength == 1.0
    assert opts.epsilon is None
    assert opts.energy_threshold == 1e-20
    assert opts.callback_interval == 500
    assert opts.max_iterations == 10000
    assert opts.differential_mode is False
    assert opts.backend == "cpu"
    assert default_pixel_size(1.0) == 0.25


def test_options_replace():
    opts = SolverOptions().replace(max_iterations=7, wavelength=0.5)
    assert opts.max_iterations == 7
    assert opts.wavelength == 0.5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"wavelength": 0.0},
        {"wavelength": -1.0},
        {"epsilon": -0.1},
        {"energy_threshold": -1.0},
        {"callback_interval": 0},
        {"max_iterations": 0},
        {"divergence_window": 1},
        {"backend": "tpu"},
    ],
)
def test_options_validation(kwargs):
    with pytest.raises(ConfigurationError):
        SolverOptions(**kwargs)


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)


def test_default_pixel_size_is_quarter_wavelength():
    m = SampleMedium.from_permittivity(np.ones((4, 4)), wavelength=2.0)
    assert m.grid.pixel_size == 0.5


def test_center_permittivity_ignores_absorption():
    # real-range midpoint, even where a shifted center would lower max|e_r - c|
    e_r = np.array([[1.0 + 1.0j, 3.0]])
    assert center_permittivity(e_r) == pytest.approx(2.0)
