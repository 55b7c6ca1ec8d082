"""Stylesheet and client script shipped with the static site.

The script runs the listen button in the browser with the same
idle/loading/playing/paused cycle as
:class:`~meridian.playback.controller.PlaybackController`, and toggles the
archive sidebar on narrow screens. Its constants come from
:mod:`meridian.playback.presentation` so the server-side view and the page
agree on labels, icons, ring geometry and scroll timings.
"""

from __future__ import annotations

import json
from string import Template

from meridian.config import SPEECH_PATH
from meridian.playback.presentation import (
    ICONS,
    IDLE_REVEAL_DELAY,
    LABELS,
    RING_CIRCUMFERENCE,
    SCROLL_THRESHOLD,
)

STYLESHEET_NAME = "style.css"
SCRIPT_NAME = "site.js"

MOBILE_BREAKPOINT = 768

_BASE_STYLESHEET = """\
body { margin: 0; background: #000; color: #ccc; font-family: Georgia, serif; line-height: 1.8; }
a { color: inherit; text-decoration: none; }
.placeholder { display: flex; align-items: center; justify-content: center; height: 100vh;
  color: #888; font-size: 1.5rem; }
.sidebar { position: fixed; left: 0; top: 0; bottom: 0; width: 200px; padding: 2rem 1.5rem;
  overflow-y: auto; border-right: 1px solid #111; background: #000; z-index: 10; }
.site-name { display: block; color: #d4c5b0; letter-spacing: 0.2em; text-transform: uppercase; }
.tagline, .month-label { font-size: 0.7rem; color: #555; letter-spacing: 0.15em;
  text-transform: uppercase; }
.tagline { margin-bottom: 3rem; }
.month { margin-bottom: 1.5rem; }
.date { display: block; padding: 0.35rem 0 0.35rem 0.75rem; font-size: 0.85rem; color: #666;
  border-left: 1px solid transparent; }
.date.current { color: #f5f0eb; border-left-color: #d4c5b0; }
.archive-toggle { display: none; position: fixed; top: 24px; left: 24px; z-index: 20;
  background: rgba(0,0,0,0.6); color: #d4c5b0; border: 1px solid rgba(212,197,176,0.25);
  padding: 0.4rem 0.9rem; font: inherit; font-size: 0.7rem; letter-spacing: 0.15em;
  text-transform: uppercase; cursor: pointer; }
.listen { position: fixed; top: 24px; right: 24px; width: 44px; height: 44px; padding: 0;
  border-radius: 50%; border: 1px solid rgba(212,197,176,0.25); background: rgba(0,0,0,0.6);
  cursor: pointer; z-index: 20; transition: opacity 0.3s, transform 0.3s; }
.listen.hidden { opacity: 0; transform: translateY(-12px); pointer-events: none; }
.listen svg { position: absolute; fill: none; stroke: #d4c5b0; stroke-width: 1.5;
  stroke-linecap: round; stroke-linejoin: round; }
.listen .icon { display: none; top: 11px; left: 11px; width: 20px; height: 20px; }
.listen .ring { display: none; top: -1px; left: -1px; width: 44px; height: 44px;
  transform: rotate(-90deg); }
.listen .ring circle { stroke-width: 2; transition: stroke-dashoffset 0.25s linear; }
.listen[data-state="playing"] .ring, .listen[data-state="paused"] .ring { display: block; }
.listen[data-state="loading"] .icon { animation: meridian-spin 1s linear infinite; }
@keyframes meridian-spin { to { transform: rotate(360deg); } }
.main-content article { max-width: 680px; margin: 0 auto; padding: 4rem 1.5rem 6rem; }
article .date { border: none; padding: 0; font-size: 0.75rem; color: #555;
  letter-spacing: 0.15em; text-transform: uppercase; margin-bottom: 2rem; }
h1 { font-weight: 300; color: #f5f0eb; line-height: 1.2; }
.subtitle { font-style: italic; color: #888; margin-bottom: 3rem; }
.divider { height: 1px; background: linear-gradient(to right, transparent, #333, transparent);
  margin-bottom: 3rem; }
.body p { margin-bottom: 1.5em; }
.body strong { font-weight: 500; color: #fff; }
.body hr { border: none; border-top: 1px solid #222; margin: 2.5em 0; }
.body blockquote { border-left: 1px solid #d4c5b0; padding-left: 1.5em; margin: 2em 0;
  font-style: italic; color: #aaa; }
.signature, .meta { margin-top: 4rem; padding-top: 2rem; border-top: 1px solid #111;
  font-size: 0.8rem; color: #444; letter-spacing: 0.1em; font-style: italic; }
.meta { margin-top: 1rem; padding-top: 0; border: none; }
"""

_RESPONSIVE_STYLESHEET = f"""\
@media (min-width: {MOBILE_BREAKPOINT}px) {{ .main-content {{ margin-left: 200px; }} }}
@media (max-width: {MOBILE_BREAKPOINT - 1}px) {{
  .archive-toggle {{ display: block; }}
  .sidebar {{ transform: translateX(-100%); transition: transform 0.3s; padding-top: 5rem; }}
  .sidebar.open {{ transform: none; }}
}}
"""


def render_stylesheet() -> str:
    """Site stylesheet, with one icon rule per playback state."""
    icon_rules = "".join(
        f'.listen[data-state="{state}"] .icon[data-icon="{icon}"] {{ display: block; }}\n'
        for state, icon in ICONS.items()
    )
    return _BASE_STYLESHEET + icon_rules + _RESPONSIVE_STYLESHEET


_SCRIPT_TEMPLATE = Template("""\
(function () {
  "use strict";

  var ENDPOINT = $endpoint;
  var LABELS = $labels;
  var CIRCUMFERENCE = $circumference;
  var SCROLL_THRESHOLD = $threshold;
  var REVEAL_DELAY_MS = $reveal_delay_ms;

  function setupArchiveToggle() {
    var toggle = document.querySelector(".archive-toggle");
    var sidebar = document.querySelector(".sidebar");
    if (!toggle || !sidebar) return;
    toggle.addEventListener("click", function () {
      var open = sidebar.classList.toggle("open");
      toggle.textContent = open ? "Close" : "Archive";
      toggle.setAttribute("aria-expanded", String(open));
    });
  }

  function setupListenButton() {
    var button = document.querySelector("button.listen");
    var audio = document.querySelector("audio.listen-audio");
    if (!button || !audio) return;
    var ring = button.querySelector(".ring circle");

    var state = "idle";
    var session = 0;
    var objectUrl = null;
    var closed = false;

    function set(next, progress) {
      state = next;
      button.setAttribute("data-state", next);
      button.setAttribute("aria-label", LABELS[next]);
      if (progress !== undefined && ring) {
        ring.style.strokeDashoffset = String(CIRCUMFERENCE * (1 - progress));
      }
    }

    function release() {
      if (objectUrl) {
        URL.revokeObjectURL(objectUrl);
        objectUrl = null;
      }
    }

    function fail(mine, err) {
      console.error("Listen error:", err);
      if (!closed && mine === session) set("idle", 0);
    }

    function start() {
      session += 1;
      var mine = session;
      set("loading");
      var text = button.getAttribute("data-speech-text") || "";
      if (!text) {
        set("idle");
        return;
      }
      fetch(ENDPOINT, {
        method: "POST",
        headers: { "Content-Type": "application/json" },
        body: JSON.stringify({ text: text })
      })
        .then(function (resp) {
          if (!resp.ok) throw new Error("TTS failed: " + resp.status);
          return resp.blob();
        })
        .then(function (blob) {
          if (closed || mine !== session) return;
          release();
          objectUrl = URL.createObjectURL(blob);
          audio.src = objectUrl;
          return audio.play().then(function () {
            if (!closed && mine === session) set("playing");
          });
        })
        .catch(function (err) { fail(mine, err); });
    }

    function activate() {
      if (closed) return;
      if (state === "playing") {
        audio.pause();
        set("paused");
      } else if (state === "paused") {
        var mine = session;
        audio.play().then(
          function () { if (mine === session) set("playing"); },
          function (err) { fail(mine, err); }
        );
      } else if (state === "idle") {
        start();
      }
    }

    function stop() {
      if (closed || state === "idle") return;
      session += 1;
      audio.pause();
      audio.currentTime = 0;
      set("idle", 0);
    }

    audio.addEventListener("timeupdate", function () {
      var duration = audio.duration;
      if (closed || !duration || !isFinite(duration)) return;
      set(state, Math.min(Math.max(audio.currentTime / duration, 0), 1));
    });
    audio.addEventListener("ended", function () {
      if (!closed) set("idle", 0);
    });
    button.addEventListener("click", activate);
    button.addEventListener("dblclick", function (event) {
      event.preventDefault();
      stop();
    });

    var lastY = window.scrollY;
    var timer = null;
    window.addEventListener("scroll", function () {
      var y = window.scrollY;
      if (y > SCROLL_THRESHOLD && y > lastY) button.classList.add("hidden");
      if (y < lastY || y < SCROLL_THRESHOLD) button.classList.remove("hidden");
      lastY = y;
      clearTimeout(timer);
      timer = setTimeout(function () { button.classList.remove("hidden"); }, REVEAL_DELAY_MS);
    }, { passive: true });

    window.addEventListener("pagehide", function () {
      closed = true;
      session += 1;
      clearTimeout(timer);
      audio.pause();
      release();
    });
  }

  document.addEventListener("DOMContentLoaded", function () {
    setupArchiveToggle();
    setupListenButton();
  });
})();
""")


def render_script(endpoint: str = SPEECH_PATH) -> str:
    """Client script for the listen button and the mobile archive toggle."""
    labels = {str(state): label for state, label in LABELS.items()}
    return _SCRIPT_TEMPLATE.substitute(
        endpoint=json.dumps(endpoint),
        labels=json.dumps(labels),
        circumference=f"{RING_CIRCUMFERENCE:.3f}",
        threshold=SCROLL_THRESHOLD,
        reveal_delay_ms=int(IDLE_REVEAL_DELAY * 1000),
    )
