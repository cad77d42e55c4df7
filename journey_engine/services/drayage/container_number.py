"""
Container Number Validation (ISO 6346).

Format: 3-letter owner code + 1-letter equipment category (commonly U)
+ 6-digit serial number + 1 check digit, e.g. MSCU1234566.

Validation never raises: a bad number comes back as a result with
``valid=False`` and a reason, so a single typo does not abort a batch.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ContainerNumberError(str, Enum):
    """Reasons a container number fails validation."""
    LENGTH = "length"
    OWNER_CODE_FORMAT = "owner_code_format"
    SERIAL_FORMAT = "serial_format"
    CHECK_DIGIT_FORMAT = "check_digit_format"
    CHECK_DIGIT_MISMATCH = "check_digit_mismatch"


CONTAINER_NUMBER_LENGTH = 11

# ISO 6346 letter values (10..38, multiples of 11 skipped)
LETTER_VALUES: Dict[str, int] = {
    "A": 10, "B": 12, "C": 13, "D": 14, "E": 15, "F": 16, "G": 17,
    "H": 18, "I": 19, "J": 20, "K": 21, "L": 23, "M": 24, "N": 25,
    "O": 26, "P": 27, "Q": 28, "R": 29, "S": 30, "T": 31, "U": 32,
    "V": 34, "W": 35, "X": 36, "Y": 37, "Z": 38,
}

_OWNER_CODE = re.compile(r"[A-Z]{4}")
_SERIAL = re.compile(r"[0-9]{6}")
_DIGIT = re.compile(r"[0-9]")
_WHITESPACE = re.compile(r"\s+")


@dataclass
class ContainerValidationResult:
    """Result of validating a container number."""
    valid: bool
    normalized: str
    error: Optional[ContainerNumberError] = None
    message: Optional[str] = None

    # Parsed parts (filled in as far as the number could be read)
    owner_code: Optional[str] = None
    equipment_category: Optional[str] = None
    serial_number: Optional[str] = None
    check_digit: Optional[int] = None
    expected_check_digit: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "valid": self.valid,
            "normalized": self.normalized,
            "error": self.error.value if self.error else None,
            "message": self.message,
            "owner_code": self.owner_code,
            "equipment_category": self.equipment_category,
            "serial_number": self.serial_number,
            "check_digit": self.check_digit,
            "expected_check_digit": self.expected_check_digit,
        }


def normalize_container_number(container_number: Optional[str]) -> str:
    """Strip all whitespace and uppercase."""
    if container_number is None:
        return ""
    return _WHITESPACE.sub("", str(container_number)).upper()


def compute_check_digit(prefix: str) -> int:
    """
    Compute the ISO 6346 check digit for the first 10 characters.

    Each character's value is multiplied by 2**position and the sum is taken
    modulo 11. A remainder of 10 maps to check digit 0.

    Raises:
        ValueError: if ``prefix`` is not 4 letters followed by 6 digits.
    """
    prefix = prefix.upper()
    if len(prefix) != CONTAINER_NUMBER_LENGTH - 1 or not (
        _OWNER_CODE.fullmatch(prefix[:4]) and _SERIAL.fullmatch(prefix[4:])
    ):
        raise ValueError(f"Expected 4 letters + 6 digits, got '{prefix}'")

    total = 0
    for position, char in enumerate(prefix):
        value = LETTER_VALUES[char] if char.isalpha() else int(char)
        total += value * (2 ** position)

    remainder = total % 11
    return 0 if remainder == 10 else remainder


def validate_container_number(container_number: Optional[str]) -> ContainerValidationResult:
    """
    Validate a container number per ISO 6346.

    Args:
        container_number: Raw input, e.g. "mscu 123 4566"

    Returns:
        ContainerValidationResult with the normalized number and, on failure,
        the first rule that was broken.
    """
    normalized = normalize_container_number(container_number)
    result = ContainerValidationResult(valid=False, normalized=normalized)

    if len(normalized) != CONTAINER_NUMBER_LENGTH:
        result.error = ContainerNumberError.LENGTH
        result.message = (
            f"Container number must be {CONTAINER_NUMBER_LENGTH} characters, got {len(normalized)}"
        )
        return result

    owner_code = normalized[:4]
    if not _OWNER_CODE.fullmatch(owner_code):
        result.error = ContainerNumberError.OWNER_CODE_FORMAT
        result.message = "Owner code and equipment category must be 4 letters (e.g., MSCU)"
        return result
    result.owner_code = owner_code[:3]
    result.equipment_category = owner_code[3]

    serial = normalized[4:10]
    if not _SERIAL.fullmatch(serial):
        result.error = ContainerNumberError.SERIAL_FORMAT
        result.message = "Serial number (characters 5-10) must be 6 digits"
        return result
    result.serial_number = serial

    expected = compute_check_digit(normalized[:10])
    result.expected_check_digit = expected

    check_char = normalized[10]
    if not _DIGIT.fullmatch(check_char):
        result.error = ContainerNumberError.CHECK_DIGIT_FORMAT
        result.message = "Check digit (character 11) must be a digit"
        return result
    result.check_digit = int(check_char)

    if result.check_digit != expected:
        result.error = ContainerNumberError.CHECK_DIGIT_MISMATCH
        result.message = f"Invalid check digit {result.check_digit}, expected {expected}"
        logger.debug(f"Check digit mismatch for {normalized}: expected {expected}")
        return result

    result.valid = True
    return result


def is_valid_container_number(container_number: Optional[str]) -> bool:
    return validate_container_number(container_number).valid
