"""passcraft -- configurable secure password generation.

Core functions for character-pool construction, uniform and pronounceable
password generation, constraint checking and strength estimation.
"""

import logging
import math
import secrets
import string
from dataclasses import dataclass, replace


logger = logging.getLogger(__name__)

MIN_LENGTH = 6
MAX_LENGTH = 100
MAX_COUNT = 3
MAX_ATTEMPTS = 1500

SPECIALS = "!@#$%^&*()_+-={}[]<>?"
VOWELS = "aeiouy"
CONSONANTS = "bcdfghjklmnpqrstvwxz"
AMBIGUOUS = frozenset("O0Il1")
CONFUSING = frozenset("il1")


# ── Errors ─────────────────────────────────────────────────────────────────


class GenerationError(ValueError):
    """Base class for every reason a password could not be generated."""

    message = "Password generation failed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class InvalidLength(GenerationError):
    message = f"Password length must be between {MIN_LENGTH} and {MAX_LENGTH}."


class NoEntropySource(GenerationError):
    message = (
        "Select Pronounceable, Numbers, or Special Characters "
        "before generating a password."
    )


class ConstraintUnsatisfiable(GenerationError):
    message = (
        "Cannot generate password with current restrictions. "
        "Try relaxing some options."
    )


# ── Configuration ──────────────────────────────────────────────────────────


def clamp_count(value) -> int:
    """Clamp a requested batch size into ``1..MAX_COUNT``; junk becomes 1."""
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        return 1
    return min(MAX_COUNT, max(1, count))


@dataclass(frozen=True)
class GenerationConfig:
    length: int = 10
    allow_numbers: bool = False
    allow_specials: bool = False
    pronounceable: bool = False
    exclude_ambiguous: bool = True
    restrict_confusing_chars: bool = False
    avoid_o_zero_together: bool = False
    count: int = MAX_COUNT

    def __post_init__(self):
        object.__setattr__(self, "count", clamp_count(self.count))

    @property
    def suffix_length(self) -> int:
        """Number of mandatory characters appended after the generated base."""
        return int(self.allow_numbers) + int(self.allow_specials)


def _checked_length(length) -> int:
    if isinstance(length, bool):
        raise InvalidLength()
    if isinstance(length, float):
        if not math.isfinite(length) or not length.is_integer():
            raise InvalidLength()
        length = int(length)
    if not isinstance(length, int) or not MIN_LENGTH <= length <= MAX_LENGTH:
        raise InvalidLength()
    return length


# ── Character pools ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CharacterPool:
    lower: str
    upper: str
    digits: str
    specials: str
    vowels: str
    consonants: str


def _without(chars: str, excluded) -> str:
    """Drop *excluded* from *chars*, but never down to an empty pool."""
    kept = "".join(ch for ch in chars if ch not in excluded)
    return kept or chars


def build_pool(config: GenerationConfig) -> CharacterPool:
    """Derive the alphabets used for one generation call."""
    ambiguous = AMBIGUOUS if config.exclude_ambiguous else frozenset()

    vowels = VOWELS
    if config.avoid_o_zero_together and config.allow_numbers:
        # no o next to a possible 0 suffix
        vowels = _without(vowels, "o")
    vowels = _without(vowels, ambiguous)
    consonants = _without(CONSONANTS, ambiguous)

    if config.restrict_confusing_chars:
        vowels = _without(vowels, "i")
        consonants = _without(consonants, "l")

    return CharacterPool(
        lower=_without(string.ascii_lowercase, ambiguous),
        upper=_without(string.ascii_uppercase, ambiguous),
        digits=_without(string.digits, ambiguous),
        specials=SPECIALS,
        vowels=vowels,
        consonants=consonants,
    )


# ── Secure random primitives ───────────────────────────────────────────────


def secure_index(max_value: int) -> int:
    """Return a secure random integer in ``[0, max_value)``.

    Reduces a 32-bit value modulo *max_value*, so sizes that do not divide
    2**32 carry a tiny bias.  Returns 0 for ``max_value <= 0``.
    """
    if max_value <= 0:
        return 0
    return secrets.randbits(32) % max_value


def secure_pick(seq):
    return seq[secure_index(len(seq))]


def secure_shuffle(items: list) -> None:
    """Fisher-Yates shuffle *items* in place with :func:`secure_index`."""
    for i in range(len(items) - 1, 0, -1):
        j = secure_index(i + 1)
        items[i], items[j] = items[j], items[i]


# ── Candidate generators ───────────────────────────────────────────────────


def generate_mixed(
    pool: CharacterPool, base_length: int, config: GenerationConfig
) -> str:
    """Uniform pick over every enabled class, with one lower and one upper."""
    available = pool.lower + pool.upper
    if config.allow_numbers:
        available += pool.digits
    if config.allow_specials:
        available += pool.specials

    chars = [secure_pick(pool.lower), secure_pick(pool.upper)]
    while len(chars) < base_length:
        chars.append(secure_pick(available))

    secure_shuffle(chars)
    return "".join(chars)


def generate_pronounceable(
    pool: CharacterPool, base_length: int, config: GenerationConfig
) -> str:
    """Alternate consonants and vowels; the first letter is capitalised."""
    if secure_index(2) == 0:
        classes = (pool.consonants, pool.vowels)
    else:
        classes = (pool.vowels, pool.consonants)

    out = "".join(secure_pick(classes[i % 2]) for i in range(base_length))
    return out[:1].upper() + out[1:]


def build_candidate(config: GenerationConfig, pool: CharacterPool) -> str:
    """Draw one raw candidate of ``config.length`` characters."""
    base_length = max(1, config.length - config.suffix_length)
    strategy = generate_pronounceable if config.pronounceable else generate_mixed
    candidate = strategy(pool, base_length, config)

    if config.allow_numbers:
        candidate += secure_pick(pool.digits)
    if config.allow_specials:
        candidate += secure_pick(pool.specials)
    return candidate


# ── Validation ─────────────────────────────────────────────────────────────


def violations(candidate: str, config: GenerationConfig) -> list[str]:
    """Return the names of the active rules *candidate* breaks."""
    failed: list[str] = []

    if config.restrict_confusing_chars:
        if sum(ch in CONFUSING for ch in candidate) > 1:
            failed.append("restrict_confusing_chars")

    if config.avoid_o_zero_together:
        has_o = "o" in candidate or "O" in candidate
        if has_o and "0" in candidate:
            failed.append("avoid_o_zero_together")

    if config.exclude_ambiguous:
        if any(ch in AMBIGUOUS for ch in candidate):
            failed.append("exclude_ambiguous")

    return failed


def is_valid(candidate: str, config: GenerationConfig) -> bool:
    return not violations(candidate, config)


# ── Generation ─────────────────────────────────────────────────────────────


def _check_preconditions(config: GenerationConfig) -> GenerationConfig:
    length = _checked_length(config.length)
    if not (config.pronounceable or config.allow_numbers or config.allow_specials):
        raise NoEntropySource()
    if length != config.length:
        config = replace(config, length=length)
    return config


def _generate_one(config: GenerationConfig, pool: CharacterPool) -> str:
    for attempt in range(1, MAX_ATTEMPTS + 1):
        candidate = build_candidate(config, pool)
        if is_valid(candidate, config):
            logger.debug("Accepted candidate after %d attempt(s)", attempt)
            return candidate
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Rejected candidate %d: %s",
                attempt, ", ".join(violations(candidate, config)),
            )

    logger.warning("Gave up after %d attempts", MAX_ATTEMPTS)
    raise ConstraintUnsatisfiable()


def generate_batch(config: GenerationConfig) -> list[str]:
    """Generate ``config.count`` passwords, or raise :class:`GenerationError`.

    Preconditions are checked before any candidate is drawn.  If any password
    in the batch exhausts its attempt budget the whole batch fails.
    """
    config = _check_preconditions(config)
    pool = build_pool(config)
    passwords = [_generate_one(config, pool) for _ in range(config.count)]
    logger.info(
        "Generated %d password(s) of length %d", len(passwords), config.length,
    )
    return passwords


def generate(config: GenerationConfig) -> str | list[str]:
    """Generate one password when ``config.count == 1``, else a list."""
    passwords = generate_batch(config)
    if config.count == 1:
        return passwords[0]
    return passwords


# ── Strength estimation ────────────────────────────────────────────────────

STRENGTH_LABELS = ["Weak", "Medium", "Strong", "Very Strong"]


def estimate_entropy(config: GenerationConfig) -> float:
    """Estimate entropy bits from the configuration alone.

    A heuristic over the alphabet size: it does not look at a generated
    value and ignores the narrowing caused by rejected candidates.
    """
    size = 26 + 26
    if config.allow_numbers:
        size += len(string.digits)
    if config.allow_specials:
        size += len(SPECIALS)

    effective = float(size)
    if config.pronounceable:
        effective = max(10.0, effective * 0.6)
    if config.exclude_ambiguous:
        effective = max(10.0, effective * 0.9)

    return config.length * math.log2(effective)


def estimate_strength(config: GenerationConfig) -> str:
    """Map :func:`estimate_entropy` to a label from :data:`STRENGTH_LABELS`.

    Returns an empty string when the length is not a positive finite number.
    """
    length = config.length
    if (
        isinstance(length, bool)
        or not isinstance(length, (int, float))
        or not math.isfinite(length)
        or length <= 0
    ):
        return ""

    bits = estimate_entropy(config)
    if bits >= 100:
        return STRENGTH_LABELS[3]
    if bits >= 80:
        return STRENGTH_LABELS[2]
    if bits >= 60:
        return STRENGTH_LABELS[1]
    return STRENGTH_LABELS[0]
