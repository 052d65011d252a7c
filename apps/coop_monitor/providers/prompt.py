from __future__ import annotations

from packages.contracts.models import CHICKEN_NAMES, CHICKEN_STATES

_ROLES = {"Henrietta": "alpha hen", "Colonel": "rooster"}
_NAMES = ", ".join(f"{name} ({_ROLES[name]})" if name in _ROLES else name for name in CHICKEN_NAMES)
_STATES = ", ".join(f'"{state}"' for state in CHICKEN_STATES[:-1]) + f', or "{CHICKEN_STATES[-1]}"'

ANALYSIS_PROMPT = f"""You are an AI monitoring system watching a live video feed of a chicken coop. \
Study this image and report detailed observations.

Respond with a JSON object using exactly this structure:
{{
    "temperature": 72,
    "humidity": 58,
    "eggs": 7,
    "activeCount": 9,
    "behaviors": [
        {{"label": "behavior name", "value": "observation", "status": "assessment"}}
    ],
    "health": [
        {{"label": "health metric", "value": "observation", "status": "assessment"}}
    ],
    "events": [
        {{"time": "HH:MM", "event": "description with <span class='highlight'>highlighted</span> parts"}}
    ],
    "chickens": [
        {{"name": "Henrietta", "state": "active", "activity": "Foraging"}},
        {{"name": "Nugget", "state": "resting", "activity": "Nesting"}}
    ]
}}

Chicken names to use: {_NAMES}

States can be: {_STATES}

Be creative and detailed. Look for:
- What the chickens are doing (foraging, dust bathing, preening, nesting, eating, drinking)
- Social interactions and pecking order dynamics
- Health indicators (feather quality, comb color, movement patterns)
- Environmental conditions
- Any notable events or behaviors

Keep it entertaining and scientific-sounding, with observations that are concise but informative."""
