import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent

# Paths
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", str(BASE_DIR / "output")))
DATA_DIR = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))

# Ensure directories exist
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
(OUTPUT_DIR / "recibos").mkdir(exist_ok=True)
(OUTPUT_DIR / "nomina").mkdir(exist_ok=True)
DATA_DIR.mkdir(parents=True, exist_ok=True)

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'liquidaciones.db'}")

# Application settings
DEBUG = os.getenv("DEBUG", "False").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", 5000))
SECRET_KEY = os.getenv("SECRET_KEY", "cambiar-en-produccion")

# Employer data printed on the pay slip
COMPANY_NAME = os.getenv("COMPANY_NAME", "Empresa XYZ S.A.")
COMPANY_TAX_ID = os.getenv("COMPANY_TAX_ID", "30-12345678-9")
COMPANY_ADDRESS = os.getenv("COMPANY_ADDRESS", "Av. Siempreviva 123, Buenos Aires")
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "$")

# Statutory contributions taken from an agreement, in pay-slip order:
# (agreement column, pay-slip label)
STATUTORY_CONTRIBUTIONS = [
    ("retirement_rate", "Aporte Jubilación"),
    ("health_insurance_rate", "Aporte Obra Social"),
    ("union_rate", "Aporte Sindical"),
    ("pami_rate", "Aporte PAMI"),
]
