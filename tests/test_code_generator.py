import pytest

from hrdesk.utils.code_generator import format_code, generate_employee_id, parse_code_sequence


@pytest.mark.parametrize(
    "code, expected",
    [("EMP007", 7), ("EMP12A", 12), ("EMP", 0), ("XYZ", 0), (None, 0), ("", 0), ("042", 42)],
)
def test_parse_code_sequence(code, expected):
    assert parse_code_sequence(code) == expected


def test_format_code_pads_to_three_digits():
    assert format_code(4) == "EMP004"
    assert format_code(1234) == "EMP1234"


def test_first_id_in_empty_store(mongo_db):
    assert generate_employee_id(mongo_db["users"], mongo_db["counters"]) == "EMP001"


def test_next_id_follows_greatest_existing(mongo_db):
    users = mongo_db["users"]
    users.insert_many(
        [
            {"personal": {"employeeId": "EMP003"}},
            {"personal": {"employeeId": "EMP007"}},
            {"personal": {}},
        ]
    )
    assert generate_employee_id(users, mongo_db["counters"]) == "EMP008"


def test_consecutive_allocations_never_repeat(mongo_db):
    users, counters = mongo_db["users"], mongo_db["counters"]
    users.insert_one({"personal": {"employeeId": "EMP002"}})

    first = generate_employee_id(users, counters)
    second = generate_employee_id(users, counters)
    assert (first, second) == ("EMP003", "EMP004")


def test_counter_catches_up_with_manual_ids(mongo_db):
    users, counters = mongo_db["users"], mongo_db["counters"]
    assert generate_employee_id(users, counters) == "EMP001"
    users.insert_one({"personal": {"employeeId": "EMP050"}})
    assert generate_employee_id(users, counters) == "EMP051"
