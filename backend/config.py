import os
import logging
from dataclasses import dataclass
from typing import Dict, Any, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_KEYS_FILE = "data/keys.json"
DEFAULT_HEARTBEAT_HOURS = 12
DEFAULT_NOTIFY_TIMEOUT = 5.0
PLACEHOLDER_ADMIN_SECRET = "change_me_in_env"


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Config:
    """Service settings. Built once at startup and handed to each component."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    debug: bool = False
    keys_file: str = DEFAULT_KEYS_FILE
    heartbeat_hours: int = DEFAULT_HEARTBEAT_HOURS
    admin_secret: str = PLACEHOLDER_ADMIN_SECRET
    telemetry_id: str = ""
    discord_webhook: str = ""
    notify_timeout: float = DEFAULT_NOTIFY_TIMEOUT
    serialize_writes: bool = True
    expiry_sweep_seconds: float = 0.0
    cors_origins: Tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "Config":
        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            host=os.environ.get("HOST", DEFAULT_HOST),
            port=int(os.environ.get("PORT", DEFAULT_PORT)),
            debug=os.environ.get("DEBUG", "0") == "1",
            keys_file=os.environ.get("KEYS_FILE", DEFAULT_KEYS_FILE),
            heartbeat_hours=int(os.environ.get("HEARTBEAT_HOURS", DEFAULT_HEARTBEAT_HOURS)),
            admin_secret=os.environ.get("ADMIN_SECRET", PLACEHOLDER_ADMIN_SECRET),
            telemetry_id=os.environ.get("TELEMETRY_ID", ""),
            discord_webhook=os.environ.get("DISCORD_WEBHOOK", "").strip(),
            notify_timeout=float(os.environ.get("NOTIFY_TIMEOUT", DEFAULT_NOTIFY_TIMEOUT)),
            serialize_writes=_env_bool("SERIALIZE_WRITES", "true"),
            expiry_sweep_seconds=float(os.environ.get("EXPIRY_SWEEP_SECONDS", "0")),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "keys_file": self.keys_file,
            "heartbeat_hours": self.heartbeat_hours,
            "has_admin_secret": self.admin_secret != PLACEHOLDER_ADMIN_SECRET,
            "has_telemetry_id": bool(self.telemetry_id),
            "has_discord_webhook": bool(self.discord_webhook),
            "serialize_writes": self.serialize_writes,
            "expiry_sweep_seconds": self.expiry_sweep_seconds,
        }


def load_config() -> Config:
    """Read .env (if present) and the environment into a Config."""
    load_dotenv()
    cfg = Config.from_env()
    if cfg.admin_secret == PLACEHOLDER_ADMIN_SECRET:
        logger.warning("ADMIN_SECRET is not set; admin endpoints use the placeholder secret")
    return cfg


def create_key_store(cfg: Config):
    """Create the key store adapter (always the JSON file store)."""
    from adapters.local.json_key_store import JsonFileKeyStore
    store = JsonFileKeyStore(cfg.keys_file, serialize_writes=cfg.serialize_writes)
    logger.info(f"Key store: {type(store).__name__} -> {cfg.keys_file} (serialize_writes={cfg.serialize_writes})")
    return store


def create_notifier(cfg: Config):
    """Create the notifier: Discord webhook when configured, else log only.

    Uses lazy imports so httpx is only loaded when a webhook is set.
    """
    if cfg.discord_webhook:
        from adapters.discord.webhook_notifier import DiscordWebhookNotifier
        notifier = DiscordWebhookNotifier(cfg.discord_webhook, timeout=cfg.notify_timeout)
    else:
        from adapters.local.log_notifier import LogNotifier
        notifier = LogNotifier()
    logger.info(f"Notifier: {type(notifier).__name__}")
    return notifier
