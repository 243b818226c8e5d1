# backend/app/core/fallback.py

from typing import Any, Callable, List, Optional, Sequence, Tuple

from app.core.logger import logger


Attempt = Tuple[str, Callable[[], Any]]


class FallbackExhausted(Exception):
    """Every attempt in a chain failed. `errors` keeps (name, exception) in call order."""

    def __init__(self, errors: List[Tuple[str, BaseException]]):
        self.errors = errors
        names = ", ".join(name for name, _ in errors) or "none"
        super().__init__(f"All attempts failed ({names})")

    @property
    def last_error(self) -> Optional[BaseException]:
        return self.errors[-1][1] if self.errors else None


def run_fallback_chain(attempts: Sequence[Attempt], label: str = "fallback") -> Tuple[str, Any]:
    """
    Run `attempts` one after another and return (name, result) of the first
    one that neither raises nor returns None. Later attempts are never called.
    """
    errors: List[Tuple[str, BaseException]] = []

    for name, attempt in attempts:
        try:
            result = attempt()
        except Exception as e:
            logger.warning(f"{label}: attempt '{name}' failed: {e}")
            errors.append((name, e))
            continue

        if result is None:
            logger.info(f"{label}: attempt '{name}' returned nothing")
            errors.append((name, LookupError(f"{name} returned no result")))
            continue

        logger.info(f"{label}: attempt '{name}' succeeded")
        return name, result

    raise FallbackExhausted(errors)
