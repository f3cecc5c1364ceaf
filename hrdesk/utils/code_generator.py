import re
from typing import Optional

from pymongo import DESCENDING, ReturnDocument

EMPLOYEE_ID_PREFIX = "EMP"
EMPLOYEE_ID_FIELD = "personal.employeeId"

_LEADING_DIGITS = re.compile(r"\d+")


def parse_code_sequence(code: Optional[str], prefix: str = EMPLOYEE_ID_PREFIX) -> int:
    """
    Extract the numeric part of a generated code.

    The prefix is stripped and the leading digits are read, so ``EMP007`` -> 7,
    ``EMP12A`` -> 12. Anything without leading digits counts as 0.

    Examples:
        parse_code_sequence('EMP007') -> 7
        parse_code_sequence('XYZ') -> 0
        parse_code_sequence(None) -> 0
    """
    if not code:
        return 0
    remainder = str(code).replace(prefix, "", 1) if str(code).startswith(prefix) else str(code)
    match = _LEADING_DIGITS.match(remainder)
    return int(match.group(0)) if match else 0


def format_code(sequence_number: int, prefix: str = EMPLOYEE_ID_PREFIX, sequence_length: int = 3) -> str:
    """Format a sequence as PREFIX + zero padded number, e.g. EMP004."""
    return f"{prefix}{str(sequence_number).zfill(sequence_length)}"


def find_last_code(collection, field_path: str = EMPLOYEE_ID_FIELD) -> Optional[str]:
    """Return the lexicographically greatest code stored under ``field_path``."""
    last_doc = collection.find_one(
        {field_path: {"$exists": True, "$nin": [None, ""]}},
        sort=[(field_path, DESCENDING)],
    )
    if not last_doc:
        return None
    value = last_doc
    for part in field_path.split("."):
        value = (value or {}).get(part)
    return value


def generate_employee_id(
    employees_collection,
    counters_collection,
    prefix: str = EMPLOYEE_ID_PREFIX,
    sequence_length: int = 3,
) -> str:
    """
    Allocate the next employee identifier, e.g. EMP008 after EMP007.

    The counter document is first raised to the highest sequence present on
    stored records (``$max``), then atomically incremented, so two requests
    can never receive the same value and manually entered ids are skipped.

    Args:
        employees_collection: collection holding employee documents
        counters_collection: collection holding named sequence counters
        prefix: Code prefix (default 'EMP')
        sequence_length: Number of digits for sequence (default: 3)

    Returns:
        Unique employee code string (e.g., EMP008)
    """
    last_sequence = parse_code_sequence(find_last_code(employees_collection), prefix)
    counter_key = f"employee_code_{prefix}"

    counters_collection.update_one(
        {"_id": counter_key},
        {"$max": {"sequence": last_sequence}},
        upsert=True,
    )
    counter_doc = counters_collection.find_one_and_update(
        {"_id": counter_key},
        {"$inc": {"sequence": 1}},
        return_document=ReturnDocument.AFTER,
    )

    sequence_number = counter_doc.get("sequence", last_sequence + 1)
    return format_code(sequence_number, prefix, sequence_length)
