import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, NamedTuple

import numpy as np
from scipy import signal as sc

import config

logger = logging.getLogger(__name__)

# Tolerance on the window bound so k * step never lands on the excluded edge
BOUNDARY_EPSILON = 1e-9

#%% Data types

class InvalidParameter(ValueError):
    """Raised when a frequency, window length or step is not a positive finite number."""


class Point(NamedTuple):
    t: float
    amplitude: float


def _points(t_values, y_values):
    for t, y in zip(t_values, y_values):
        yield Point(float(t), float(y))


class Curve(NamedTuple):
    t: np.ndarray
    y: np.ndarray

    def points(self) -> Iterator[Point]:
        return _points(self.t, self.y)


class Samples(NamedTuple):
    t: np.ndarray                                                              # sampling instants
    y: np.ndarray

    def points(self) -> Iterator[Point]:
        return _points(self.t, self.y)


@dataclass(frozen=True)
class AliasingVerdict:
    nyquist: float
    samples_per_cycle: float
    is_aliasing: bool
    apparent_freq: float
    required_sampling_freq: float


def _check_positive(name, value):
    # bool is an int subclass, True is not a frequency
    is_number = isinstance(value, (int, float, np.number)) and not isinstance(value, (bool, np.bool_))
    if not (is_number and math.isfinite(value) and value > 0):
        raise InvalidParameter(f"{name} must be a positive finite number, got {value!r}")


def _time_grid(window_length, step):
    """Instants k * step lying in [0, window_length)."""
    _check_positive("window_length", window_length)
    _check_positive("step", step)
    n_points = math.ceil(window_length / step - BOUNDARY_EPSILON)
    return np.arange(n_points) * step

#%% Signal generation

def continuous_signal(signal_freq, window_length=config.WINDOW_LENGTH, step=config.CURVE_STEP):
    """
    Generates the unit-amplitude sine shown as the "continuous" signal.

    Args:
        signal_freq (float): The frequency of the signal (in Hz).
        window_length (float): Length of the time window (in s), end excluded.
        step (float): Spacing between two consecutive points (in s).

    Returns:
        Curve: ceil(window_length / step) points, time-ascending.
    """
    _check_positive("signal_freq", signal_freq)
    t = _time_grid(window_length, step)
    return Curve(t, np.sin(2 * np.pi * signal_freq * t))


def sample_signal(signal_freq, sampling_freq, window_length=config.WINDOW_LENGTH):
    """
    Samples the sine at the sampling frequency over the time window.

    The instants are computed as k / f_e rather than by adding the sampling
    period repeatedly, so the count only depends on f_e * window_length.

    Args:
        signal_freq (float): The frequency of the signal (in Hz).
        sampling_freq (float): The sampling frequency (in Hz).
        window_length (float): Length of the time window (in s), end excluded.

    Returns:
        Samples: ceil(f_e * window_length) samples in [0, window_length).
    """
    _check_positive("signal_freq", signal_freq)
    _check_positive("sampling_freq", sampling_freq)
    _check_positive("window_length", window_length)

    n_samples = math.ceil(sampling_freq * window_length - BOUNDARY_EPSILON)
    t_sampled = np.arange(n_samples) / sampling_freq
    return Samples(t_sampled, np.sin(2 * np.pi * signal_freq * t_sampled))

#%% Sinc interpolation

def sinc(x):
    """
    Normalized sinc, sin(pi*x) / (pi*x).

    Exactly 1 at x = 0 and exactly 0 at the other integers, where the float
    evaluation of sin(pi*n) would leave a residue around 1e-16.
    Scalars give a float, arrays give an array of the same shape.
    """
    x = np.asarray(x, dtype=float)
    y = np.sinc(x)
    y = np.where((x != 0) & (x == np.round(x)), 0.0, y)
    if y.ndim == 0:
        return float(y)
    return y


def _sinc_matrix(samples, sampling_freq, t_reconstructed):
    # One row per sample, one column per reconstruction time
    return sinc(sampling_freq * (np.asarray(t_reconstructed, dtype=float)[None, :] - samples.t[:, None]))


def interpolate(samples, sampling_freq, t_reconstructed):
    """
    Evaluates the Whittaker-Shannon sum of the samples at arbitrary times.

    Only the given samples contribute: the infinite sum of the theorem is
    truncated to the samples taken inside the window, so the result drifts
    away from the original signal near the window edges.

    Args:
        samples (Samples): The sampled signal.
        sampling_freq (float): The sampling frequency (in Hz).
        t_reconstructed (numpy.ndarray): The times at which the signal should be reconstructed.

    Returns:
        numpy.ndarray: The values of the reconstructed signal.
    """
    _check_positive("sampling_freq", sampling_freq)
    t_reconstructed = np.atleast_1d(np.asarray(t_reconstructed, dtype=float))
    if len(samples.t) == 0:
        return np.zeros_like(t_reconstructed)

    # Weighted sum of the rows of the sinc matrix
    return np.sum(samples.y[:, None] * _sinc_matrix(samples, sampling_freq, t_reconstructed), axis=0)


def reconstruct_signal(samples, signal_freq, sampling_freq,
                       window_length=config.WINDOW_LENGTH, step=config.CURVE_STEP):
    """
    Reconstructs the sampled signal on the same time grid as continuous_signal.

    Args:
        samples (Samples): The sampled signal.
        signal_freq (float): The frequency of the original signal (in Hz).
        sampling_freq (float): The sampling frequency (in Hz).
        window_length (float): Length of the time window (in s), end excluded.
        step (float): Spacing between two consecutive points (in s).

    Returns:
        Curve: The reconstructed signal.
    """
    _check_positive("signal_freq", signal_freq)
    t = _time_grid(window_length, step)
    logger.debug("Reconstructing %d samples on %d points (f=%.2f Hz, f_e=%.2f Hz)",
                 len(samples.t), len(t), signal_freq, sampling_freq)
    return Curve(t, interpolate(samples, sampling_freq, t))


def sinc_components(samples, sampling_freq, window_length=config.WINDOW_LENGTH, step=config.CURVE_STEP):
    """
    Splits the reconstruction into the contribution of every sample.

    Returns one curve per sample, amplitude * sinc(f_e * (t - t_n)); summing
    them point by point gives reconstruct_signal.
    """
    _check_positive("sampling_freq", sampling_freq)
    t = _time_grid(window_length, step)
    contributions = samples.y[:, None] * _sinc_matrix(samples, sampling_freq, t)
    return [Curve(t, row) for row in contributions]

#%% Aliasing

def apparent_frequency(signal_freq, sampling_freq):
    """Frequency the samples actually represent, folded into [0, f_e / 2]."""
    return abs((signal_freq + sampling_freq / 2) % sampling_freq - sampling_freq / 2)


def aliasing_verdict(signal_freq, sampling_freq):
    """
    Applies the sampling theorem to the current parameters.

    The comparison is strict: a signal exactly at the Nyquist frequency
    counts as reconstructible.
    """
    _check_positive("signal_freq", signal_freq)
    _check_positive("sampling_freq", sampling_freq)

    nyquist = sampling_freq / 2
    return AliasingVerdict(
        nyquist=nyquist,
        samples_per_cycle=sampling_freq / signal_freq,
        is_aliasing=signal_freq > nyquist,
        apparent_freq=apparent_frequency(signal_freq, sampling_freq),
        required_sampling_freq=2 * signal_freq,
    )


def peak_times(curve, prominence=config.PEAK_PROMINENCE):
    """
    Times of the crests of a curve.

    Args:
        curve (Curve): Any curve produced by this module.
        prominence (float): Minimal prominence of a crest, filters out sinc ripples
            and floating point noise.

    Returns:
        numpy.ndarray: The times of the crests, ascending.
    """
    peaks, _ = sc.find_peaks(curve.y, prominence=prominence)
    return curve.t[peaks]

#%% Animation clock

def advance_clock(current_time, increment=config.CLOCK_INCREMENT, window_length=config.WINDOW_LENGTH):
    """Moves the time cursor forward, wrapping modulo the window length."""
    _check_positive("window_length", window_length)
    return (current_time + increment) % window_length

#%% Calls used by the page

def get_continuous_curve(signal_freq) -> Curve:
    return continuous_signal(signal_freq, config.WINDOW_LENGTH, config.CURVE_STEP)


def get_samples(signal_freq, sampling_freq) -> Samples:
    return sample_signal(signal_freq, sampling_freq, config.WINDOW_LENGTH)


def get_reconstruction(samples, signal_freq, sampling_freq) -> Curve:
    return reconstruct_signal(samples, signal_freq, sampling_freq, config.WINDOW_LENGTH, config.CURVE_STEP)


def get_components(samples, sampling_freq) -> List[Curve]:
    return sinc_components(samples, sampling_freq, config.WINDOW_LENGTH, config.CURVE_STEP)


def get_aliasing_verdict(signal_freq, sampling_freq) -> AliasingVerdict:
    return aliasing_verdict(signal_freq, sampling_freq)
