from dotenv import load_dotenv

# Pick up TWILIO_* and STATS_* from a local .env during development.
load_dotenv()
