import logging

import matplotlib.pyplot as plt
import numpy as np
import streamlit as st

import config
from logging_config import setup_logging
from signal_model import (
    InvalidParameter,
    advance_clock,
    get_aliasing_verdict,
    get_components,
    get_continuous_curve,
    get_reconstruction,
    get_samples,
    peak_times,
)

# streamlit runs this file as __main__
logger = logging.getLogger("main")

COLOR_SIGNAL = '#2563eb'
COLOR_COMPONENT = '#9333ea'
COLOR_RECONSTRUCTED = '#10b981'
COLOR_ALIASING = '#ef4444'
COLOR_CURSOR = '#6b7280'

#%% Definitions of functions

def plot_view(time, continuous, samples, verdict, reconstruction=None, components=()):
    """
    Draws one tab of the demo.

    Args:
        time (float): Position of the time cursor (in s).
        continuous (Curve): The original signal.
        samples (Samples): The sampled signal.
        verdict (AliasingVerdict): Colours the samples red when aliasing.
        reconstruction (Curve, optional): The sinc reconstruction, only drawn in the reconstruction tab.
        components (list of Curve, optional): The sinc contribution of each sample.

    Returns:
        matplotlib.figure.Figure: The figure to hand to st.pyplot.
    """
    show_sinc = reconstruction is not None
    sample_color = COLOR_ALIASING if verdict.is_aliasing else COLOR_RECONSTRUCTED

    fig, ax = plt.subplots(figsize=(10, 3))
    ax.set_xlim(0, config.WINDOW_LENGTH)
    ax.set_ylim(-1.5, 1.5)                                                     # room for the overshoot of the reconstruction at the edges
    ax.plot(continuous.t, continuous.y, color=COLOR_SIGNAL, linewidth=2,
            alpha=0.3 if show_sinc else 1, label='original signal')

    if show_sinc:
        for component in components:
            ax.plot(component.t, component.y, color=COLOR_COMPONENT, linewidth=1, alpha=0.2)
        ax.plot(reconstruction.t, reconstruction.y, color=COLOR_RECONSTRUCTED, linewidth=2, label='reconstructed signal')
        crests = peak_times(reconstruction)
        ax.plot(crests, np.interp(crests, reconstruction.t, reconstruction.y), 'x', color=COLOR_RECONSTRUCTED)

    markerline, stemlines, _ = ax.stem(samples.t, samples.y, basefmt=' ')
    markerline.set_color(sample_color)
    stemlines.set_color(sample_color)

    ax.axvline(time, color=COLOR_CURSOR, linestyle='--', linewidth=1)         # current time
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Amplitude")
    ax.grid()
    ax.legend(loc='upper right')
    return fig


def show_figure(fig):
    st.pyplot(fig)
    plt.close(fig)                                                             # the page redraws every tick


@st.fragment(run_every=config.TICK_INTERVAL)
def animated_view(continuous, samples, verdict, reconstruction, components):
    st.session_state.time = advance_clock(st.session_state.time, config.CLOCK_INCREMENT, config.WINDOW_LENGTH)
    time = st.session_state.time

    tab_sampling, tab_reconstruction = st.tabs(["Sampling", "Reconstruction"])
    with tab_sampling:
        show_figure(plot_view(time, continuous, samples, verdict))
    with tab_reconstruction:
        show_figure(plot_view(time, continuous, samples, verdict, reconstruction, components))

#%% Printings on streamlit

setup_logging(level=config.LOG_LEVEL)

st.set_page_config(layout="wide")                                              # puts streamlit in widescreen by default
st.title("Nyquist Sampling Theorem")

st.markdown("""
         A sine is sampled at a configurable rate and rebuilt from its samples by sinc interpolation. As long as the sampling rate stays above twice the signal frequency, the reconstruction follows the original signal; below that limit the samples describe a slower sine and the reconstruction follows that one instead (aliasing).
""")
st.latex(r"s(t) = \sum_{n} s(n T_e) \operatorname{sinc} \left( \frac{t - n T_e}{T_e} \right)")

if "time" not in st.session_state:
    st.session_state.time = 0.0

celPlot, celParam = st.columns([3, 1])

#%% Definition of the parameters
with celParam:
    signal_freq = st.slider("Signal frequency (Hz)", config.SIGNAL_FREQ_MIN, config.SIGNAL_FREQ_MAX,
                            config.SIGNAL_FREQ_DEFAULT, config.SIGNAL_FREQ_STEP)
    sampling_freq = st.slider("Sampling frequency (Hz)", config.SAMPLING_FREQ_MIN, config.SAMPLING_FREQ_MAX,
                              config.SAMPLING_FREQ_DEFAULT, config.SAMPLING_FREQ_STEP)
    show_components = st.checkbox("Show individual sinc components", value=False)

#%% Signal processing

try:
    verdict = get_aliasing_verdict(signal_freq, sampling_freq)
    continuous = get_continuous_curve(signal_freq)
    samples = get_samples(signal_freq, sampling_freq)
    reconstruction = get_reconstruction(samples, signal_freq, sampling_freq)
    components = get_components(samples, sampling_freq) if show_components else []
except InvalidParameter as exc:
    logger.error("Rejected parameters f=%r Hz, f_e=%r Hz: %s", signal_freq, sampling_freq, exc)
    st.error(str(exc))
    st.stop()

if st.session_state.get("was_aliasing") != verdict.is_aliasing:
    logger.info("f=%.1f Hz, f_e=%.1f Hz: %s", signal_freq, sampling_freq,
                "aliasing" if verdict.is_aliasing else "no aliasing")
    st.session_state.was_aliasing = verdict.is_aliasing

#%% content of each cell of the table
with celParam:
    if verdict.is_aliasing:
        st.warning(f"Aliasing detected! Sampling rate should be > {verdict.required_sampling_freq:.1f} Hz")

    st.subheader("Current status")
    st.markdown(f"""
        - Nyquist frequency: {verdict.nyquist:.1f} Hz
        - Samples per cycle: {verdict.samples_per_cycle:.1f}
        - Apparent frequency of the samples: {verdict.apparent_freq:.1f} Hz
    """)
    if verdict.is_aliasing:
        st.error("Aliasing occurring - signal cannot be reconstructed accurately")
    else:
        st.success("Signal can be accurately reconstructed")

with celPlot:
    animated_view(continuous, samples, verdict, reconstruction, components)

#%% detailed explanations

with st.expander("More detailed explanation"):
    st.markdown(r"""
        **1. Sampling the signal:**
        - The sine $s(t) = \sin(2 \pi f t)$ is read every $T_e = 1 / f_e$ seconds over a 4 s window.
        - The Shannon-Nyquist theorem guarantees a faithful reconstruction when $f_e > 2 f$, i.e. when the signal stays below the Nyquist frequency $f_e / 2$.
        - Above that limit the samples are exactly those of a sine at the folded frequency $|((f + f_e/2) \bmod f_e) - f_e/2|$: this is **aliasing**, and the sample points turn red.

        **2. Signal reconstruction by sinc interpolation:**
        - Each sample is multiplied by a normalized sinc, $\operatorname{sinc}(x) = \frac{\sin(\pi x)}{\pi x}$, centered on its own instant. Tick "Show individual sinc components" to see them.
        - The sinc equals 1 at its own sample and 0 at every other sample, so the reconstruction passes through all the samples.
        - The sum of the theorem runs over infinitely many samples; here only the samples of the window are used, which is why the reconstruction drifts near $t = 0$ and $t = 4$ s.
    """)
