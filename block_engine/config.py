"""
Configuration — variables d'environnement lues une seule fois, au chargement.

BLOCK_ENGINE_POSITION_POLICY : "shift" (décalage minimal) | "renumber" (0..N-1)
BLOCK_ENGINE_POSITION_STEP   : pas entre deux positions consécutives (défaut 1)
BLOCK_ENGINE_LOG_LEVEL       : niveau de log pour setup_logging() (défaut INFO)

Les fonctions du moteur ne consultent ces valeurs que si l'appelant omet
l'argument correspondant (policy, step).
"""
import logging
import os
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

PositionPolicy = Literal["shift", "renumber"]

POSITION_POLICY = os.getenv("BLOCK_ENGINE_POSITION_POLICY", "shift")
POSITION_STEP   = os.getenv("BLOCK_ENGINE_POSITION_STEP", "1")
LOG_LEVEL       = os.getenv("BLOCK_ENGINE_LOG_LEVEL", "INFO")

LOG_FORMAT = "%(asctime)s %(levelname)s — %(message)s"


class Settings(BaseModel):
    """Instantané validé de la configuration."""
    position_policy: PositionPolicy = "shift"
    position_step: float = Field(default=1, gt=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()


def get_settings() -> Settings:
    """Settings construits depuis les constantes du module (l'environnement n'est pas relu)."""
    return Settings(
        position_policy=POSITION_POLICY,
        position_step=POSITION_STEP,
        log_level=LOG_LEVEL,
    )


def setup_logging(level: Optional[str] = None) -> None:
    """Configure le logging racine pour un script ou un service appelant."""
    logging.basicConfig(level=(level or get_settings().log_level).upper(), format=LOG_FORMAT)
