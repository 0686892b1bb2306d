import logging
import os
from dataclasses import dataclass
from typing import Optional


def _log_level(raw: str) -> str:
    level = raw.strip().upper()
    # niveau inconnu -> INFO plutôt qu'un ValueError au démarrage
    if not isinstance(logging.getLevelName(level), int):
        return "INFO"
    return level


@dataclass(frozen=True)
class Settings:
    table_name: str
    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        # PRODUCTS_TABLE est obligatoire: KeyError si la stack ne l'a pas injecté
        return cls(
            table_name=os.environ["PRODUCTS_TABLE"],
            region=os.environ.get("AWS_REGION") or None,
            endpoint_url=os.environ.get("DYNAMODB_ENDPOINT_URL") or None,
            log_level=_log_level(os.environ.get("LOG_LEVEL", "INFO")),
        )
