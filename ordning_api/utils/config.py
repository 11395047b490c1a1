from pathlib import Path
import os
from dotenv import load_dotenv

ENV_PATH = Path(__file__).parent.parent / ".env"

load_dotenv(dotenv_path=ENV_PATH)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Hard ceiling for a single search page; the env var can only lower it.
SEARCH_MAX_LIMIT = 100
SEARCH_DEFAULT_LIMIT = min(int(os.getenv("SEARCH_DEFAULT_LIMIT", "20")), SEARCH_MAX_LIMIT)

# Field weights of a searchable document (name > description > properties)
NAME_WEIGHT = 1.0
DESCRIPTION_WEIGHT = 0.4
PROPERTIES_WEIGHT = 0.2

# Tier multipliers for the final ranking score
PHRASE_TIER_WEIGHT = 3.0
ALL_TERMS_TIER_WEIGHT = 2.0
ANY_TERMS_TIER_WEIGHT = 1.0
