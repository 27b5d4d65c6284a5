from dataclasses import dataclass
import os


def _get_int(name: str, default: int) -> int:
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    return int(value)


def _get_float(name: str, default: float) -> float:
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    return float(value)


def _get_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name, "").strip().lower()
    if not value:
        return default
    return value in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class ParserConfig:
    pattern_cache_ttl_seconds: int
    parsing_log_sample_rate: float
    parsing_log_text_limit: int
    default_country: str
    dynamic_patterns_enabled: bool


def load_config() -> ParserConfig:
    sample_rate = _get_float("PARSING_LOG_SAMPLE_RATE", 0.1)
    if not 0.0 <= sample_rate <= 1.0:
        raise RuntimeError("PARSING_LOG_SAMPLE_RATE must be between 0 and 1")

    ttl = _get_int("PATTERN_CACHE_TTL_SECONDS", 300)
    if ttl < 0:
        raise RuntimeError("PATTERN_CACHE_TTL_SECONDS must not be negative")

    return ParserConfig(
        pattern_cache_ttl_seconds=ttl,
        parsing_log_sample_rate=sample_rate,
        parsing_log_text_limit=_get_int("PARSING_LOG_TEXT_LIMIT", 1000),
        default_country=(os.environ.get("DEFAULT_COUNTRY", "").strip() or "PE").upper(),
        dynamic_patterns_enabled=_get_bool("DYNAMIC_PATTERNS_ENABLED", True),
    )
