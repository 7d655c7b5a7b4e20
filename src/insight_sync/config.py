import os
from dotenv import load_dotenv
load_dotenv()
DEFAULT_BATCH_SIZE=int(os.getenv("INSIGHT_BATCH_SIZE","200"))
TIMEOUT=float(os.getenv("INSIGHT_TIMEOUT","30"))
AUTH_USER="insight"
VALID_TYPES=("school","section","student","teacher","term")
# prefixes recognised by combine, in match order
COMBINE_TYPES=("section","student","teacher")
MOCK_TOKEN=os.getenv("MOCK_TOKEN","secret")
