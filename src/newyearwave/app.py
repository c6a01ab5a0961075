"""New Year Wave: Streamlit app following solar midnight across the globe.

Run with:
    uv run streamlit run src/newyearwave/app.py
"""

import html
from pathlib import Path

import streamlit as st
from dotenv import load_dotenv
from loguru import logger
from streamlit_js_eval import get_geolocation, streamlit_js_eval

load_dotenv()

from newyearwave.config import load_settings  # noqa: E402
from newyearwave.geo import GeoDataError, load_countries  # noqa: E402
from newyearwave.i18n import t  # noqa: E402
from newyearwave.logs import configure_logging  # noqa: E402
from newyearwave.models import CountryRegion, Phase, UserLocation  # noqa: E402
from newyearwave.renderers.plotly_map import render_wave_map  # noqa: E402
from newyearwave.share import share_text, twitter_intent_url  # noqa: E402
from newyearwave.ticker import WaveTicker  # noqa: E402
from newyearwave.wave import (  # noqa: E402
    format_countdown,
    format_local,
    format_longitude,
    format_utc,
    snapshot_is_new_year,
    snapshot_midnight_time,
    status_key,
)

settings = load_settings()
configure_logging(settings.log_level, settings.log_dir)

# --- Browser language and time zone (read once, cached in session_state) ---
# On the first run the JS calls return None; the rerun triggered by
# streamlit_js_eval fills them in.
if "lang" not in st.session_state:
    _browser_lang: str | None = streamlit_js_eval(
        js_expressions="navigator.language", key="_lang_detect", height=0
    )
    if _browser_lang is not None:
        st.session_state.lang = "ko" if _browser_lang.lower().startswith("ko") else "en"
if "tz_name" not in st.session_state:
    _browser_tz: str | None = streamlit_js_eval(
        js_expressions="Intl.DateTimeFormat().resolvedOptions().timeZone",
        key="_tz_detect",
        height=0,
    )
    if _browser_tz is not None:
        st.session_state.tz_name = _browser_tz

_lang: str = st.session_state.get("lang", "en")
_tz_name: str = st.session_state.get("tz_name", "UTC")

st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="🌍",
    layout="wide",
    initial_sidebar_state="collapsed",
)

# --- Session state initialization ---

if "ticker" not in st.session_state:
    st.session_state.ticker = WaveTicker(interval=settings.tick_seconds)
if "user_location" not in st.session_state:
    st.session_state.user_location = None
if "locating" not in st.session_state:
    st.session_state.locating = False
if "location_error" not in st.session_state:
    st.session_state.location_error = None
if "locate_attempt" not in st.session_state:
    st.session_state.locate_attempt = 0

st.markdown(
    """
    <style>
    html, body, [data-testid="stAppViewContainer"], [data-testid="stMain"] {
        background-color: #0a0a12 !important;
        color: #e2e8f0;
    }
    [data-testid="stHeader"], [data-testid="stToolbar"] {
        display: none !important;
    }
    .nyw-title { text-align: center; font-size: 2.6rem; margin-bottom: 0; color: #fcd34d; }
    .nyw-subtitle { text-align: center; color: #94a3b8; margin-top: 0.2rem; }
    .nyw-countdown { text-align: center; margin: 0.6rem 0 1rem; }
    .nyw-countdown .label { color: #94a3b8; font-size: 0.85rem; letter-spacing: 0.1em; }
    .nyw-countdown .value { color: #2dd4bf; font-size: 2rem; font-variant-numeric: tabular-nums; }
    .nyw-stat .label { color: #64748b; font-size: 0.8rem; }
    .nyw-stat .value { color: #e2e8f0; font-size: 1.1rem; font-variant-numeric: tabular-nums; }
    .nyw-new-year { color: #fcd34d; }
    .nyw-old-year { color: #94a3b8; }
    .nyw-error { border: 1px solid #ff6b6b; color: #ff9999; padding: 0.8rem 1.2rem; border-radius: 8px; }
    [data-testid="stButton"] button {
        background-color: rgba(45, 212, 191, 0.15) !important;
        color: #2dd4bf !important;
        border: 1px solid #2dd4bf !important;
        border-radius: 6px !important;
    }
    </style>
    """,
    unsafe_allow_html=True,
)


@st.cache_data(show_spinner=False)
def _countries(url: str, cache_dir: str) -> tuple[CountryRegion, ...]:
    return load_countries(url, Path(cache_dir))


def _stat(label: str, value: str, css: str = "") -> str:
    return (
        f"<div class='nyw-stat'><div class='label'>{html.escape(label)}</div>"
        f"<div class='value {css}'>{html.escape(value)}</div></div>"
    )


# --- Map data ---
try:
    with st.spinner(t("loading_map", _lang)):
        countries = _countries(settings.geo_url, str(settings.cache_dir))
except GeoDataError as e:
    logger.error("Map data unavailable: {}", e)
    st.markdown(
        f"<div class='nyw-error'>{t('error_map', _lang).format(error=html.escape(str(e)))}</div>",
        unsafe_allow_html=True,
    )
    if st.button(t("btn_retry", _lang), key="retry_map"):
        _countries.clear()
        st.rerun()
    st.stop()


@st.fragment(run_every=settings.tick_seconds)
def live_view() -> None:
    snap = st.session_state.ticker.tick()
    transition = snap.transition
    year = transition.display_year

    subtitle_key = (
        "subtitle_tracking" if snap.phase is Phase.BEFORE else "subtitle_sweeping"
    )
    st.markdown(
        f"<h1 class='nyw-title'>{t('page_title', _lang)}</h1>"
        f"<p class='nyw-subtitle'>{t(subtitle_key, _lang).format(year=year)}</p>",
        unsafe_allow_html=True,
    )

    if transition.countdown is not None:
        st.markdown(
            f"<div class='nyw-countdown'><div class='label'>{t('countdown_label', _lang)}</div>"
            f"<div class='value'>{format_countdown(transition.countdown)}</div></div>",
            unsafe_allow_html=True,
        )

    cols = st.columns(4)
    cols[0].markdown(_stat(t("label_utc", _lang), format_utc(snap.instant)), unsafe_allow_html=True)
    cols[1].markdown(
        _stat(t("label_local", _lang), f"{format_local(snap.instant, _tz_name)} ({_tz_name})"),
        unsafe_allow_html=True,
    )
    cols[2].markdown(
        _stat(t("label_midnight", _lang), format_longitude(snap.midnight_lon)),
        unsafe_allow_html=True,
    )
    cols[3].markdown(
        _stat(t("label_status", _lang), t(status_key(snap), _lang)),
        unsafe_allow_html=True,
    )

    st.progress(
        min(1.0, transition.coverage_percent / 100),
        text=f"{t('label_coverage', _lang)}: {transition.coverage_percent:.1f}%",
    )

    location: UserLocation | None = st.session_state.user_location
    fig = render_wave_map(snap, countries, location, tz_name=_tz_name, lang=_lang)
    st.plotly_chart(
        fig, use_container_width=True, config={"displayModeBar": False}
    )

    if location is not None:
        in_new = snapshot_is_new_year(snap, location.lng)
        when = format_local(snapshot_midnight_time(snap, location.lng), _tz_name)
        status = t("in_year" if in_new else "waiting_year", _lang).format(year=year)
        st.markdown(
            _stat(t("location_midnight", _lang).format(year=year), when)
            + _stat("", status, "nyw-new-year" if in_new else "nyw-old-year"),
            unsafe_allow_html=True,
        )


live_view()

# --- User location ---
# get_geolocation resolves on a later rerun; keep asking until it answers.
# Each attempt gets a fresh component key so a retry is not served the last failure.
if st.session_state.user_location is None:
    if st.button(t("btn_locate", _lang), key="locate_btn"):
        st.session_state.locating = True
        st.session_state.location_error = None
        st.session_state.locate_attempt += 1
    if st.session_state.locating:
        st.caption(t("locating", _lang))
        _loc = get_geolocation(
            component_key=f"_geolocation_{st.session_state.locate_attempt}"
        )
        if _loc is not None:
            st.session_state.locating = False
            coords = _loc.get("coords") if isinstance(_loc, dict) else None
            if coords and "latitude" in coords and "longitude" in coords:
                st.session_state.user_location = UserLocation(
                    lat=float(coords["latitude"]), lng=float(coords["longitude"])
                )
                logger.info("User location acquired")
            else:
                logger.warning("Geolocation failed: {}", _loc)
                st.session_state.location_error = t("error_location", _lang)
            st.rerun()
    if st.session_state.location_error:
        st.markdown(
            f"<div class='nyw-error'>{st.session_state.location_error}</div>",
            unsafe_allow_html=True,
        )

# --- Share ---
_year = st.session_state.ticker.last.transition.display_year
_text = share_text(_year, _lang)
st.markdown(
    f"<p style='text-align:center'>"
    f"<a href='{html.escape(twitter_intent_url(_text, settings.site_url))}' target='_blank'>{t('btn_tweet', _lang)}</a>"
    f" · <a href='{html.escape(settings.site_url)}' target='_blank'>{t('link_site', _lang)}</a>"
    f" · <a href='{html.escape(settings.timezone_map_url)}' target='_blank'>{t('timezone_map', _lang)}</a>"
    f"</p><p style='text-align:center;color:#64748b;font-size:0.8rem'>{t('about', _lang)}</p>",
    unsafe_allow_html=True,
)
