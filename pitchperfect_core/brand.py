from __future__ import annotations

APP_NAME = "PitchPerfect Connect"
TAGLINE = "Player report cards for coaches and parents"
DISCLAIMER = (
    "Report cards reflect coach observations for development purposes only. "
    "Narrative text is AI-assisted and reviewed by the authoring coach."
)
DEFAULT_LOGO_URL = "https://cdn-icons-png.flaticon.com/512/1665/1665670.png"
