"""Merkezi .env yukleyici. Tum scriptler ve Settings bunu import etsin."""
from pathlib import Path
from dotenv import load_dotenv

# Proje kokundeki .env dosyasini bul ve yukle (mevcut env degiskenleri ezilmez)
ENV_PATH = Path(__file__).resolve().parent / ".env"
load_dotenv(ENV_PATH, override=False)
