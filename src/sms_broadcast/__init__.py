from __future__ import annotations

from dotenv import load_dotenv

# Pick up TWILIO_* / ADMIN_NUMBERS / OWNER_* from a local .env in dev.
load_dotenv()
