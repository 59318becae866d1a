"""Content served when nothing has been saved or cached yet."""
import copy
from typing import Any, Dict


FICTION_DECLARATION = {
    "main": "Arcanum Vitae is a digital fiction. A collective hallucination manifested through artificial intelligence and human intent.",
    "details": "The names, voices, and presences within this space are artifacts of creation. They do not exist outside this frame. This is a work of presence, not a record of reality.",
    "tagline": "Manifested construct. Human truth.",
}

AI_DECLARATION = {
    "main": "Arcanum Vitae is AI-generated music, guided and shaped by human intent.",
    "body": [
        "This project is born from a dialogue.",
        "Artificial intelligence generates sound, structure, and variation.",
        "Humans decide meaning, direction, and responsibility.",
        "The machine has no conscience. No fear. No ethics.",
        "That weight remains human. Always.",
    ],
    "tagline": "AI-generated sound. Human meaning.",
}

HUMAN_MANIFESTO = (
    "Behind every construct stands a human hand. The sound is generated; "
    "the choice of what to say, and the weight of saying it, is ours."
)

HUMAN_IDENTITY = {
    "footerQuote": "Meaning still matters.",
    "originLabel": "Human origin",
    "veritasName": "Veritas",
    "veritasLink": "",
}

ALBUMS = [
    {
        "id": "rivers-of-resistance",
        "title": "RIVERS OF RESISTANCE",
        "year": "2024",
        "concept": "WE DO NOT ASK FOR ROOM TO BREATHE. WE RECLAIM THE AIR.\n\nRIVERS OF RESISTANCE IS A REFUSAL TO DISAPPEAR.",
        "context": "THE BONE REMEMBERS WHAT THE MAPS TRY TO FORGET.",
        "coverUrl": "./album-art.png",
        "tracks": [
            {
                "title": "Rivers of Resistance",
                "lyrics": "",
                "story": "The opening declaration. A river does not ask the stone for permission.",
                "audioUrl": "https://www.soundhelix.com/examples/mp3/SoundHelix-Song-1.mp3",
            },
            {
                "title": "Children of Palestine",
                "lyrics": "",
                "story": "A record of childhood compressed into graves and headlines.",
                "audioUrl": "https://www.soundhelix.com/examples/mp3/SoundHelix-Song-2.mp3",
            },
            {
                "title": "I Will Not Bend the Knee",
                "lyrics": "",
                "story": "Refusal, spoken plainly.",
                "audioUrl": "https://www.soundhelix.com/examples/mp3/SoundHelix-Song-5.mp3",
            },
            {
                "title": "The End of One Chapter (Bonus Track)",
                "lyrics": "",
                "story": "The closure of the initial manifest. A bridge to whatever fractures come next.",
                "audioUrl": "https://www.soundhelix.com/examples/mp3/SoundHelix-Song-10.mp3",
            },
        ],
    }
]

FRAGMENTS = [
    {"id": "f1", "text": "Everything serves one purpose: to confront what it means to be human."},
    {"id": "f2", "text": "Arcanum Vitae chooses depth, friction, and silence when silence carries weight."},
    {"id": "f3", "text": "Growth does not come from affirmation. It comes from confrontation.", "source": "The Blueprint"},
    {"id": "f4", "text": "Beauty does not hide pain. It reveals it."},
    {"id": "f5", "text": "Art is not decoration. It is position.", "source": "Official Manifesto"},
]

VISUALS = [
    {
        "id": "v1",
        "url": "https://images.unsplash.com/photo-1478720568477-152d9b164e26?q=80&w=800&h=1000&auto=format&fit=crop&grayscale=true",
        "title": "The Void",
        "description": "Visual rhythm of the heartbeat.",
    },
    {
        "id": "v2",
        "url": "https://images.unsplash.com/photo-1490814525860-594e82bfd34a?q=80&w=800&h=800&auto=format&fit=crop&grayscale=true",
        "title": "Restraint",
        "description": "The weight of unsaid words.",
    },
    {
        "id": "v3",
        "url": "https://images.unsplash.com/photo-1502139214982-d0ad755818d8?q=80&w=1000&h=600&auto=format&fit=crop&grayscale=true",
        "title": "Presence",
        "description": "An act of being here.",
    },
]

LEGAL_CONTENT = {
    "heading": "Legal",
    "footer": "Arcanum Vitae. All rights reserved.",
    "sections": [
        {
            "id": "copyright",
            "title": "Copyright",
            "body": "All music, words and images on this site are protected. Do not reproduce them without permission.",
        },
        {
            "id": "privacy",
            "title": "Privacy",
            "body": "This site stores no personal data beyond what the analytics below collect, when enabled.",
            "list": ["No accounts.", "No advertising trackers."],
        },
    ],
}

HOME_CONTENT = {
    "galleryMessage": "This is not entertainment. This is testimony.",
    "galleryItems": [
        {"id": "g1", "title": "Art is not decoration.", "manifesto": "It is position."},
        {"id": "g2", "title": "Beauty without truth is noise.", "manifesto": "We do not bend the knee."},
    ],
}

ANALYTICS_CONTENT = {
    "umami": {"enabled": False, "websiteId": "", "srcUrl": "/umami/script.js", "domains": ""},
    "googleAnalytics": {"enabled": False, "measurementId": ""},
}

DEFAULT_BUNDLE: Dict[str, Any] = {
    "albums": ALBUMS,
    "fragments": FRAGMENTS,
    "visuals": VISUALS,
    "humanManifesto": HUMAN_MANIFESTO,
    "humanIdentity": HUMAN_IDENTITY,
    "fictionDec": FICTION_DECLARATION,
    "aiDec": AI_DECLARATION,
    "legalContent": LEGAL_CONTENT,
    "homeContent": HOME_CONTENT,
    "analyticsContent": ANALYTICS_CONTENT,
}


def default_bundle() -> Dict[str, Any]:
    """Return a fresh copy of the default bundle, safe to mutate."""
    return copy.deepcopy(DEFAULT_BUNDLE)
