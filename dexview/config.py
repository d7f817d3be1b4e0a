# dexview/config.py
"""Fixed settings for the catalog viewer.

Values here are plain module constants.  Components that need a different
value (tests, an alternate mirror of the API) take it as a constructor
argument instead of reading the environment.
"""

API_BASE = "https://pokeapi.co/api/v2"

# Number of entries requested per list page.
PAGE_SIZE = 20

SPRITES_BASE = "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites"

# Shared by every entity; reachable without templating.
PLACEHOLDER_IMG = f"{SPRITES_BASE}/items/poke-ball.png"

# Thumbnail chain templates, highest fidelity first.
ARTWORK_URL_TEMPLATE = SPRITES_BASE + "/pokemon/other/official-artwork/{id}.png"
SPRITE_URL_TEMPLATE = SPRITES_BASE + "/pokemon/{id}.png"

# Seconds before an HTTP request is abandoned and reported as failed.
REQUEST_TIMEOUT = 10.0

USER_AGENT = "dexview/1.0"

# Record fields probed for the detail dialog image, in display priority.
DETAIL_SPRITE_PATHS = (
    ("other", "official-artwork", "front_default"),
    ("other", "home", "front_default"),
    ("other", "dream_world", "front_default"),
    ("front_default",),
)

# Upper bound on cached pages and on cached records, per client.
CACHE_SIZE = 64
