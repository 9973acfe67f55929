# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pathlib import Path
from yaml    import load, FullLoader
from dotenv  import load_dotenv
import os

KOK_DIZIN = Path(__file__).resolve().parent.parent

# .env yükleme
load_dotenv(dotenv_path=KOK_DIZIN / ".env")

# AYAR.yml yükleme
with open(KOK_DIZIN / "AYAR.yml", "r", encoding="utf-8") as yaml_dosyasi:
    AYAR = load(yaml_dosyasi, Loader=FullLoader)

# Genel ayarlar
PRODUCTION = os.getenv("PRODUCTION", "false").lower() == "true"

PROJE = AYAR["PROJE"]
HOST  = os.getenv("HOST", AYAR["APP"]["HOST"])
PORT  = int(os.getenv("PORT", AYAR["APP"]["PORT"]))

# WebSocket flood kontrolü
WS_MAX_PAYLOAD    = int(AYAR["WS"]["MAX_PAYLOAD"])
WS_GENERAL_RATE   = int(AYAR["WS"]["GENERAL_RATE"])
WS_HIGH_FREQ_RATE = int(AYAR["WS"]["HIGH_FREQ_RATE"])
WS_SEND_TIMEOUT   = float(AYAR["WS"]["SEND_TIMEOUT"])
