import unittest
from datetime import datetime

from src.models import PORTS, SOURCES, TRIP_TYPES, VISIT_STATUSES, NewVisitData, validate_new_visit


def _data(**overrides) -> NewVisitData:
    values = dict(
        ship_name="Shannon Trader",
        gross_tonnage=8900,
        initial_eta=datetime(2026, 3, 15, 6, 30),
        source="AIS",
    )
    values.update(overrides)
    return NewVisitData(**values)


class TestValidateNewVisit(unittest.TestCase):
    def test_minimal_visit_is_valid(self):
        validate_new_visit(_data())
        validate_new_visit(_data(berth_port="Moneypoint", imo_number=9321483))

    def test_rejections_name_the_field_and_the_fix(self):
        cases = {
            "Ship name": _data(ship_name=""),
            "Gross tonnage": _data(gross_tonnage=True),
            "IMO number": _data(imo_number=-1),
            "ETA": _data(initial_eta="tomorrow"),
            "Berth port": _data(berth_port="Cork"),
            "Source": _data(source=""),
        }
        for field, data in cases.items():
            with self.subTest(field=field):
                with self.assertRaises(ValueError) as ctx:
                    validate_new_visit(data)
                message = str(ctx.exception)
                self.assertTrue(message.startswith(f"New Visit / {field}:"), message)
                self.assertIn("Fix:", message)

    def test_vocabularies(self):
        self.assertIn("Foynes", PORTS)
        self.assertEqual(VISIT_STATUSES[0], "Due")
        self.assertIn("Good Guess", SOURCES)
        self.assertEqual(TRIP_TYPES[:2], ("In", "Out"))


if __name__ == "__main__":
    unittest.main()
