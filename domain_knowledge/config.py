#!/usr/bin/env python3
from dataclasses import dataclass
import os
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Config:
    """Engine configuration"""
    db_path: str = os.getenv("DOMKNOW_DB_PATH", "data/domain_knowledge.db")
    db_timeout: float = float(os.getenv("DOMKNOW_DB_TIMEOUT", "5.0"))
    api_port: int = int(os.getenv("DOMKNOW_API_PORT", "8010"))
    enable_debug: bool = os.getenv("DOMKNOW_DEBUG", "false").lower() in ["true", "1", "yes"]

    # Wilson score quantile (1.96 = 95% interval)
    wilson_z: float = float(os.getenv("DOMKNOW_WILSON_Z", "1.96"))

    # Selector ranking gates
    selector_min_samples: int = int(os.getenv("DOMKNOW_SELECTOR_MIN_SAMPLES", "2"))
    selector_min_confidence: float = float(os.getenv("DOMKNOW_SELECTOR_MIN_CONFIDENCE", "0.5"))
    discovered_min_confidence: float = float(os.getenv("DOMKNOW_DISCOVERED_MIN_CONFIDENCE", "0.4"))

    # Category ranking gates
    category_min_samples: int = int(os.getenv("DOMKNOW_CATEGORY_MIN_SAMPLES", "2"))
    category_min_confidence: float = float(os.getenv("DOMKNOW_CATEGORY_MIN_CONFIDENCE", "0.3"))

config = Config()
