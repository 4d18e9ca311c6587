# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
dashboard.py — Streamlit viewer for a running Chronoforge simulation.

    streamlit run dashboard.py

The simulation writes dashboard_data.json every few ticks; this page only
reads that file and never imports the simulation package.  With
streamlit-autorefresh installed the page polls once a second, otherwise a
Refresh button is shown.
"""

import json
import pathlib
from collections import Counter

import numpy as np
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

try:
    from streamlit_autorefresh import st_autorefresh
except ImportError:
    st_autorefresh = None

SNAPSHOT = pathlib.Path("dashboard_data.json")

BG_DARK  = '#0e1117'
BG_PANEL = '#111827'
GRID     = '#1e2233'

BIOME_COLOURS = {
    'Plains':     (154, 205,  50),
    'Forest':     ( 34, 139,  34),
    'Mountains':  (105, 105, 105),
    'Desert':     (210, 180, 140),
    'Coast':      ( 95, 158, 160),
    'Tundra':     (200, 215, 225),
    'Swamp':      ( 85, 107,  47),
    'Rainforest': ( 16,  96,  48),
}
UNKNOWN_BIOME = (120, 120, 120)

PALETTE = ['#FF4B4B', '#FFB347', '#FAFF66', '#66FF99', '#66ECFF',
           '#6699FF', '#CC66FF', '#FF66C0', '#FFFFFF', '#AAAAAA']

MARKER_FOR_KIND = {
    'City': 'square', 'Temple': 'triangle-up', 'Monument': 'diamond',
    'Academy': 'pentagon', 'Marketplace': 'hexagon', 'Palace': 'star-square',
    'Wonder': 'star', 'Ruins': 'x',
}

STAGE_ORDER = ['Naive', 'Developing', 'Mature', 'Hardened', 'Broken', 'Enlightened']

_AXIS_OFF = dict(showticklabels=False, showgrid=False, zeroline=False)


# ════════════════════════════════════════════════════════════════════════════
# Snapshot access
# ════════════════════════════════════════════════════════════════════════════

@st.cache_data(ttl=2)
def _parse(mtime: float) -> dict | None:
    # mtime only keys the cache so a rewritten file is re-read
    try:
        return json.loads(SNAPSHOT.read_text(encoding='utf-8'))
    except (FileNotFoundError, json.JSONDecodeError):
        return None


def read_snapshot() -> dict | None:
    if not SNAPSHOT.exists():
        return None
    return _parse(SNAPSHOT.stat().st_mtime)


def colour_by_civ(snap: dict) -> dict:
    """Stable colour per civ id, by population rank."""
    return {c['id']: PALETTE[i % len(PALETTE)] for i, c in enumerate(snap.get('civs', []))}


# ════════════════════════════════════════════════════════════════════════════
# Figures
# ════════════════════════════════════════════════════════════════════════════

@st.cache_data(ttl=10)
def biome_raster(grid_json: str, names_json: str) -> np.ndarray:
    grid  = np.asarray(json.loads(grid_json), dtype=np.int64)
    names = json.loads(names_json)
    if grid.size == 0 or not names:
        return np.zeros((1, 1, 3), dtype=np.uint8)
    lut = np.array([BIOME_COLOURS.get(n, UNKNOWN_BIOME) for n in names], dtype=np.uint8)
    return lut[np.clip(grid, 0, len(names) - 1)]


def world_to_pixel(pos, span: float, cells: int):
    scale = cells / span
    return (pos[0] + span / 2) * scale - 0.5, (pos[1] + span / 2) * scale - 0.5


def map_figure(snap: dict) -> go.Figure:
    raster = biome_raster(json.dumps(snap['biome_grid']), json.dumps(snap['biomes']))
    cells  = raster.shape[0]
    span   = snap.get('world_span', 600.0)
    colour = colour_by_civ(snap)

    fig = px.imshow(raster, origin='lower', aspect='equal')

    sites = snap.get('territories', [])
    if sites:
        pts = [world_to_pixel(s['position'], span, cells) for s in sites]
        fig.add_trace(go.Scatter(
            x=[p[0] for p in pts], y=[p[1] for p in pts], mode='markers',
            name='Holdings',
            marker=dict(size=7, opacity=0.8, line=dict(width=0.5, color='black'),
                        color=[colour.get(s['owner_id'], '#555555') for s in sites],
                        symbol=[MARKER_FOR_KIND.get(s['kind'], 'circle') for s in sites]),
            text=[f"{s['name']} · {s['kind']}" for s in sites],
            hovertemplate='%{text}<extra></extra>',
        ))

    for c in snap.get('civs', [])[:len(PALETTE)]:
        x, y = world_to_pixel(c['position'], span, cells)
        fig.add_trace(go.Scatter(
            x=[x], y=[y], mode='markers', name=c['name'],
            marker=dict(size=float(np.clip(np.sqrt(c['population']) / 8.0, 6, 26)),
                        color=colour[c['id']], opacity=0.9,
                        line=dict(width=1.2, color='white')),
            hovertemplate=(f"<b>{c['name']}</b> · {c['type']}<br>"
                           f"{c['population']:,.0f} people · {c['stage']}<br>"
                           f"stability {c['stability']:.2f} · "
                           f"military {c['military']:.1f}<extra></extra>"),
        ))

    fig.update_layout(
        height=460, coloraxis_showscale=False,
        paper_bgcolor=BG_DARK, plot_bgcolor=BG_DARK,
        margin=dict(l=0, r=0, t=0, b=0),
        xaxis=dict(range=[-0.5, raster.shape[1] - 0.5], **_AXIS_OFF),
        yaxis=dict(range=[-0.5, cells - 0.5], **_AXIS_OFF),
        legend=dict(bgcolor='rgba(14,17,23,0.75)', font=dict(color='white', size=11),
                    x=1.01, y=1, xanchor='left'),
    )
    return fig


def _dark(fig: go.Figure, title: str, height: int) -> go.Figure:
    fig.update_layout(
        title=dict(text=title, x=0.0, font=dict(color='#dddddd', size=13)),
        height=height, paper_bgcolor=BG_DARK, plot_bgcolor=BG_PANEL,
        font=dict(color='white'), margin=dict(l=50, r=20, t=40, b=40),
        legend=dict(bgcolor='rgba(0,0,0,0)'),
    )
    fig.update_xaxes(gridcolor=GRID, zeroline=False)
    fig.update_yaxes(gridcolor=GRID, zeroline=False)
    return fig


def population_figure(snap: dict, top: int = 5) -> go.Figure:
    fig = go.Figure()
    colour = colour_by_civ(snap)
    for c in snap.get('civs', [])[:top]:
        series = [(h['year'], h['populations'][c['name']])
                  for h in snap.get('pop_history', []) if c['name'] in h['populations']]
        if not series:
            continue
        years, pops = zip(*series)
        fig.add_trace(go.Scatter(x=years, y=pops, mode='lines', name=c['name'],
                                 line=dict(color=colour[c['id']], width=2)))
    fig.update_xaxes(title='Year')
    fig.update_yaxes(title='Population')
    return _dark(fig, 'Population of the five largest realms', 300)


def stage_figure(snap: dict) -> go.Figure:
    counts = Counter(c['stage'] for c in snap.get('civs', []))
    stages = [s for s in STAGE_ORDER if counts[s]] + \
             sorted(s for s in counts if s not in STAGE_ORDER)
    fig = go.Figure(go.Bar(x=stages, y=[counts[s] for s in stages],
                           marker_color='#66ECFF'))
    return _dark(fig, 'Personality stages', 240)


# ════════════════════════════════════════════════════════════════════════════
# Page
# ════════════════════════════════════════════════════════════════════════════

st.set_page_config(page_title='Chronoforge', page_icon='📜', layout='wide')
st.markdown("""
<style>
[data-testid="stTextArea"] textarea {
    font-family: 'Courier New', monospace; font-size: 11px;
    background: #0a0e17; color: #a8c8a8;
}
</style>
""", unsafe_allow_html=True)

if st_autorefresh is not None:
    st_autorefresh(interval=1000, key='snapshot_poll')

snap = read_snapshot()

with st.sidebar:
    st.title('📜 Chronoforge')
    if st_autorefresh is None and st.button('⟳ Refresh', use_container_width=True):
        st.cache_data.clear()
        st.rerun()
    if snap is not None:
        civs = snap.get('civs', [])
        st.metric('Year', f"{snap['year']:,.1f}")
        st.metric('Living civilizations', snap['alive'])
        st.metric('Total population', f"{sum(c['population'] for c in civs):,.0f}")
        st.metric('Ticks per second', f"{snap['tick_rate']:.2f}")
        st.divider()
        for name in snap.get('biomes', []):
            r, g, b = BIOME_COLOURS.get(name, UNKNOWN_BIOME)
            st.markdown(f'<span style="background:rgb({r},{g},{b});padding:2px 8px;'
                        f'border-radius:3px;font-size:12px;color:#fff">{name}</span>',
                        unsafe_allow_html=True)

if snap is None:
    st.info('Waiting for **dashboard_data.json**. Start a run with '
            '`python -m chronoforge`; the first snapshot lands after 20 ticks.')
    st.stop()

ruins = sum(1 for t in snap.get('territories', []) if t.get('ruined'))
st.markdown(f"### Year {snap['year']:,.1f} · {snap['alive']} civilizations · "
            f"{len(snap.get('religions', []))} faiths · {ruins} ruins")

tab_world, tab_stories, tab_chronicle = st.tabs(['World', 'Stories', 'Chronicle'])

with tab_world:
    left, right = st.columns([3, 2], gap='medium')
    left.plotly_chart(map_figure(snap), use_container_width=True,
                      config={'displayModeBar': False}, key='map')
    right.plotly_chart(population_figure(snap), use_container_width=True,
                       config={'displayModeBar': False}, key='pop')
    right.plotly_chart(stage_figure(snap), use_container_width=True,
                       config={'displayModeBar': False}, key='stages')

with tab_stories:
    arcs = snap.get('arcs', [])
    if not arcs:
        st.caption('No story has begun yet.')
    names = {c['id']: c['name'] for c in snap.get('civs', [])}
    for a in arcs:
        hero = names.get(a['protagonist_id'], 'a fallen realm')
        st.markdown(f"**{a['name']}**{' ⚔' if a['epic'] else ''}  \n"
                    f"{a['type']} · {a['stage']} · following {hero}")
        st.progress(min(1.0, max(0.0, a['progress'])), text=f"tension {a['tension']:.2f}")
    faiths = snap.get('religions', [])
    if faiths:
        st.subheader('Faiths')
        st.dataframe([{'faith': f['name'], 'founded by': names.get(f['founder_id'], '—')}
                      for f in faiths], hide_index=True, use_container_width=True)

with tab_chronicle:
    st.text_area('Latest events', '\n'.join(reversed(snap.get('event_tail', []))),
                 height=420, disabled=True, label_visibility='collapsed')
