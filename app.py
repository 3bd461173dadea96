"""Vida Medieval (Streamlit)

Principles:
- UI only renders + triggers.
- Core domain and engine are pure Python modules.
- Content is LLM-only (Gemini). If the oracle fails the turn is abandoned
  with a clear error and the previous state stays on screen.

Entry point: streamlit run app.py
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Optional

import streamlit as st

import core
from content.media import from_data_url
from content.providers.base import NarrativeOracle, ProviderStatus
from core.lineages import LINEAGES, get_lineage
from core.state import ATTRIBUTE_LABELS, Choice, GameState, state_to_dict
from engine.config import (
    MAX_FONT_SIZE,
    OracleSettings,
    SessionConfig,
    bigger_font,
    next_theme,
    reset_font,
    toggle_mute,
)
from engine.logging import dumps_run_export, make_run_export
from engine.pipeline import GameOverError, TurnAborted, play_turn, start_game

APP_TITLE = "Vida Medieval"
APP_SUBTITLE = "Uma vida inteira na Idade Média, escolha por escolha."
APP_VERSION = "1.0.0"

logging.basicConfig(
    level=os.getenv("VIDA_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("vida_medieval.app")

st.set_page_config(page_title=APP_TITLE, page_icon="🏰", layout="wide", initial_sidebar_state="expanded")

EXPECTED_CORE_API = "core-vm1-20261018"


def _check_core_version() -> None:
    """Stop early when app.py and the core package come from different deploys."""
    api_ver = getattr(core, "API_VERSION", None)
    if api_ver != EXPECTED_CORE_API:
        st.error(
            "A versão do núcleo não corresponde à do app (deploy parcial?).\n\n"
            f"Esperado: {EXPECTED_CORE_API}, encontrado: {api_ver!r}"
        )
        st.stop()

THEME_COLORS = {
    "parchment": ("#f5e6c8", "#2c1810"),
    "wood": ("#2c1810", "#e0d8d0"),
    "light": ("#f8f9fa", "#212529"),
    "castelo": ("#3a3a3a", "#f0f0f0"),
    "verdejo": ("#2d4a22", "#e8f5e9"),
    "floresta": ("#1b261b", "#dcedc8"),
}

SEPARATOR_ICONS = {1: "👑", 2: "🗡️", 3: "💀", 4: "🗡️", 5: "👥"}

ATTRIBUTE_ICONS = {"health": "❤️", "strength": "🗡️", "intelligence": "🧠", "wealth": "💰", "honor": "🛡️"}


def _css(cfg: SessionConfig) -> str:
    bg, fg = THEME_COLORS.get(cfg.theme, THEME_COLORS["parchment"])
    return f"""
<style>
.stApp {{background: {bg}; color: {fg}; font-family: Georgia, serif;}}
.stApp p, .stApp li {{font-size: {int(cfg.font_size)}px;}}
.block-container {{padding-top: 3.2rem; padding-bottom: 2rem;}}
.card {{
  border: 1px solid rgba(128,128,128,0.25);
  border-radius: 16px;
  padding: 14px 16px;
  background: rgba(255,255,255,0.04);
}}
.warn {{border-color: rgba(220,60,40,0.6);}}
.separator {{text-align: center; font-size: 40px; opacity: .6;}}
.small {{font-size: 13px; opacity:.75;}}
</style>
"""


# =========================
# Helpers
# =========================


def _now_id() -> str:
    return datetime.utcnow().strftime("%Y%m%d%H%M%S%f")


def _secrets() -> Optional[dict]:
    try:
        return dict(st.secrets)
    except FileNotFoundError:
        return None


def _oracle() -> NarrativeOracle:
    return OracleSettings.from_env(secrets=_secrets()).build_provider()


def _oracle_status() -> ProviderStatus:
    return _oracle().status()


def weather_icon(weather: str) -> str:
    w = weather or ""
    if "Chuva" in w:
        return "🌧️"
    if "Tempestade" in w:
        return "⚡"
    if "Vento" in w:
        return "💨"
    return "☀️"


# =========================
# Session State
# =========================


def _ensure_state() -> None:
    ss = st.session_state
    if "run_id" not in ss:
        ss.run_id = _now_id()
    if "screen" not in ss:
        ss.screen = "start"  # start | selection | game | death
    if "session_config" not in ss:
        ss.session_config = SessionConfig()
    if "game_state" not in ss:
        ss.game_state = None
    if "initial_state" not in ss:
        ss.initial_state = None
    if "audio" not in ss:
        ss.audio = None
    if "logs" not in ss:
        ss.logs = []
    if "last_error" not in ss:
        ss.last_error = ""


def _reset_run() -> None:
    ss = st.session_state
    keep = {"session_config": ss.get("session_config", SessionConfig())}
    for k in list(ss.keys()):
        del ss[k]
    for k, v in keep.items():
        ss[k] = v
    _ensure_state()


# =========================
# Actions
# =========================


def _on_select_lineage(lineage_id: int) -> None:
    ss = st.session_state
    lineage = get_lineage(lineage_id)
    with st.spinner("O cronista prepara a sua história (Gemini)…"):
        try:
            result = start_game(lineage=lineage, oracle=_oracle(), config=ss.session_config)
        except TurnAborted as e:
            ss.last_error = str(e)
            return
    ss.game_state = result.state
    ss.initial_state = result.state
    ss.audio = result.audio
    ss.logs = [result.log]
    ss.last_error = ""
    ss.screen = "game"


def _on_choose(choice: Choice) -> None:
    ss = st.session_state
    state: GameState = ss.game_state
    with st.spinner("O destino se desenrola…"):
        try:
            result = play_turn(state=state, choice=choice, oracle=_oracle(), config=ss.session_config)
        except (TurnAborted, GameOverError) as e:
            # previous state stays; the player may choose again
            ss.last_error = str(e)
            return
    ss.game_state = result.state
    ss.audio = result.audio
    ss.logs.append(result.log)
    ss.last_error = ""
    if result.state.is_game_over:
        ss.screen = "death"


# =========================
# UI Pages
# =========================


def _render_status_bar(state: GameState) -> None:
    p = state.player
    a = p.attributes
    cols = st.columns([1.6, 1, 1, 1, 1, 1, 1.2, 1.4])
    cols[0].metric("Personagem", p.name, f"{p.age} anos", delta_color="off")
    for i, key in enumerate(("health", "strength", "intelligence", "wealth", "honor"), start=1):
        cols[i].metric(f"{ATTRIBUTE_ICONS[key]} {ATTRIBUTE_LABELS[key]}", int(getattr(a, key)))
    cols[6].metric("🍀 Sorte", f"{p.luck}/100")
    cols[7].metric(f"{weather_icon(state.weather)} Dia {state.day}", state.weather, state.season, delta_color="off")

    c = p.currency
    st.caption(
        f"🪙 {c.libras} libras · {c.sous} sous · {c.dinheiros} dinheiros  |  📍 {p.kingdom}  |  "
        f"🎒 {', '.join(p.inventory) if p.inventory else 'vazio'}"
    )


def _render_image(state: GameState) -> None:
    if not state.current_image_url:
        return
    try:
        data, _mime = from_data_url(state.current_image_url)
    except ValueError:
        st.image(state.current_image_url, use_container_width=True)
        return
    st.image(data, use_container_width=True)


def _render_audio() -> None:
    ss = st.session_state
    if ss.audio and not ss.session_config.muted:
        st.audio(ss.audio, format="audio/wav", autoplay=True)


def page_start() -> None:
    st.title(APP_TITLE)
    st.caption(APP_SUBTITLE)
    st.markdown(
        """
        ### Como jogar?
        - Escolha uma **linhagem**: nobre, camponês, sem morada, bandido ou religioso.
        - A cada turno você escolhe uma ação; o cronista narra as consequências.
        - Saúde, força, inteligência, riqueza e honra vão de 0 a 100. **Saúde 0 é a morte.**
        - Sua família e aliados lembram de tudo: a afinidade deles muda com suas escolhas.

        **Nota:** a narrativa é gerada pelo Gemini. Sem chave de API o jogo não começa.
        """
    )
    if st.button("Começar", use_container_width=True):
        st.session_state.screen = "selection"
        st.rerun()


def page_selection() -> None:
    st.title("Escolha sua linhagem")
    ps = _oracle_status()
    cols = st.columns(len(LINEAGES))
    for col, lineage in zip(cols, LINEAGES.values()):
        with col:
            st.markdown("<div class='card'>", unsafe_allow_html=True)
            st.markdown(f"### {lineage.icon}\n**{lineage.name}**")
            st.caption(f"{lineage.description} · {lineage.kingdom}")
            a = lineage.initial_attributes
            st.markdown(
                f"<div class='small'>❤️ {a.health} · 🗡️ {a.strength} · 🧠 {a.intelligence} · "
                f"💰 {a.wealth} · 🛡️ {a.honor}</div>",
                unsafe_allow_html=True,
            )
            if st.button("Nascer aqui", key=f"lineage_{lineage.id}", disabled=not ps.ok, use_container_width=True):
                _on_select_lineage(lineage.id)
                st.rerun()
            st.markdown("</div>", unsafe_allow_html=True)


def page_game() -> None:
    ss = st.session_state
    state: GameState = ss.game_state

    _render_status_bar(state)
    st.markdown(f"<div class='separator'>{SEPARATOR_ICONS.get(state.player.lineage_id, '🗡️')}</div>", unsafe_allow_html=True)

    left, right = st.columns([1.4, 1.0])
    with left:
        _render_image(state)
        if state.critical_warning:
            st.warning(f"⚠️ {state.critical_warning}")
        st.markdown(state.current_story)
        _render_audio()

    with right:
        st.markdown("#### 👥 Pessoas da sua vida")
        for npc in state.npcs:
            st.markdown(f"**{npc.name}** · {npc.role} · _{npc.status.value}_  \n{npc.relationship}")
            st.progress(int(npc.affinity) / 100.0, text=f"Afinidade {npc.affinity}")

    st.markdown("---")
    st.markdown("### O que você faz?")
    for i, choice in enumerate(state.choices):
        label = choice.text if not choice.consequence_hint else f"{choice.text}  —  {choice.consequence_hint}"
        if st.button(label, key=f"choice_{state.day}_{i}", use_container_width=True):
            _on_choose(choice)
            st.rerun()


def page_death() -> None:
    ss = st.session_state
    state: GameState = ss.game_state
    st.title("💀 Fim da jornada")
    p = state.player
    st.markdown(f"**{p.name}** viveu até os **{p.age} anos**, no dia {state.day}.")
    st.error(state.epitaph())
    _render_image(state)
    st.markdown(state.current_story)
    _render_audio()
    if st.button("Recomeçar", use_container_width=True):
        _reset_run()
        st.rerun()


def page_history() -> None:
    ss = st.session_state
    st.title("Crônica")
    if not ss.logs:
        st.info("Ainda não há registros.")
        return
    for item in reversed(ss.logs):
        title = "Início" if item.get("event") == "start" else (item.get("choice") or {}).get("text", "")
        with st.expander(f"Dia {item.get('day')} — {title}"):
            st.json(item)


def page_debug() -> None:
    ss = st.session_state
    st.title("Debug")
    st.subheader("Oracle")
    st.json(_oracle_status().__dict__)
    st.subheader("SessionConfig")
    st.json(ss.session_config.__dict__)
    st.subheader("GameState")
    st.json(state_to_dict(ss.game_state, include_media=False) if ss.game_state else {})


# =========================
# Sidebar
# =========================


def sidebar() -> str:
    ss = st.session_state
    cfg: SessionConfig = ss.session_config

    st.sidebar.markdown(f"**{APP_TITLE}**  ")
    st.sidebar.markdown(f"v{APP_VERSION}")
    st.sidebar.markdown("---")

    c1, c2, c3 = st.sidebar.columns(3)
    if c1.button("🎨", help=f"Tema: {cfg.theme}", use_container_width=True):
        ss.session_config = next_theme(cfg)
        st.rerun()
    if c2.button("A+", help=f"Fonte: {cfg.font_size}px", use_container_width=True):
        ss.session_config = bigger_font(cfg) if cfg.font_size < MAX_FONT_SIZE else reset_font(cfg)
        st.rerun()
    if c3.button("🔇" if cfg.muted else "🔊", help="Narração", use_container_width=True):
        ss.session_config = toggle_mute(cfg)
        st.rerun()

    ps = _oracle_status()
    if ps.ok:
        st.sidebar.success(f"Gemini pronto ({ps.model})")
    else:
        st.sidebar.error("Gemini indisponível")
        st.sidebar.caption(ps.error or "Chave de API ausente")

    if st.sidebar.button("Recomeçar", use_container_width=True):
        _reset_run()
        st.rerun()

    if ss.get("game_state") is not None and ss.get("initial_state") is not None:
        export = make_run_export(
            lineage_id=ss.game_state.player.lineage_id,
            config=cfg,
            initial_state=ss.initial_state,
            turn_logs=list(ss.logs),
            final_state=ss.game_state,
        )
        st.sidebar.download_button(
            "Baixar crônica (JSON)",
            data=dumps_run_export(export).encode("utf-8"),
            file_name=f"vida_medieval_{ss.run_id}.json",
            mime="application/json",
        )

    st.sidebar.markdown("---")
    return st.sidebar.radio("Página", ["Jogar", "Crônica", "Debug"], index=0)


# =========================
# Main
# =========================


def main() -> None:
    _check_core_version()
    _ensure_state()
    page = sidebar()
    ss = st.session_state
    st.markdown(_css(ss.session_config), unsafe_allow_html=True)

    if ss.last_error:
        st.error(f"O cronista não respondeu: {ss.last_error}")
        st.info("Nada mudou no seu jogo. Tente a escolha novamente.")

    if page == "Crônica":
        page_history()
        return
    if page == "Debug":
        page_debug()
        return

    if ss.screen in ("game", "death") and ss.game_state is None:
        logger.error("screen=%s without game state; resetting", ss.screen)
        _reset_run()

    if ss.screen == "selection":
        page_selection()
    elif ss.screen == "game":
        page_game()
    elif ss.screen == "death":
        page_death()
    else:
        page_start()


if __name__ == "__main__":
    main()
