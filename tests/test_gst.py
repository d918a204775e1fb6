import unittest
from datetime import date
from types import SimpleNamespace

from garagehub.services.gst import is_effective, resolve_slab
from garagehub.services.invoices import TaxRates, price_lines
from garagehub.errors import InvalidInputError


def slab(name, start, end=None):
    return SimpleNamespace(name=name, effective_from=start, effective_to=end)


class TestSlabResolution(unittest.TestCase):

    def test_window_is_inclusive(self):
        gst = slab("GST 18", date(2026, 4, 1), date(2027, 3, 31))
        self.assertTrue(is_effective(gst, date(2026, 4, 1)))
        self.assertTrue(is_effective(gst, date(2027, 3, 31)))
        self.assertFalse(is_effective(gst, date(2026, 3, 31)))
        self.assertFalse(is_effective(gst, date(2027, 4, 1)))

    def test_open_ended_slab(self):
        self.assertTrue(is_effective(slab("GST 28", date(2020, 1, 1)), date(2099, 1, 1)))

    def test_latest_start_wins_on_overlap(self):
        old = slab("Old", date(2020, 1, 1))
        new = slab("New", date(2026, 1, 1))
        self.assertIs(resolve_slab([old, new], date(2026, 6, 1)), new)
        self.assertIs(resolve_slab([old, new], date(2025, 6, 1)), old)

    def test_no_slab_in_effect(self):
        self.assertIsNone(resolve_slab([slab("Future", date(2030, 1, 1))], date(2026, 10, 18)))


class TestPriceLines(unittest.TestCase):

    lines = [
        {"description": "Brake pad", "quantity": 2.0, "unit_price": 500.0, "item_type": "part", "hsn_sac": None},
        {"description": "Labor: 2 hours", "quantity": 2.0, "unit_price": 250.0, "item_type": "labor", "hsn_sac": None},
    ]

    def test_split_rate(self):
        rates = TaxRates.split(18)
        self.assertEqual((rates.cgst, rates.sgst, rates.igst), (9, 9, 0))

    def test_discount_reduces_taxable_base(self):
        priced = price_lines(self.lines, 300, TaxRates.split(18))
        self.assertEqual(priced["subtotal"], 1500)
        self.assertEqual(priced["taxable_base"], 1200)
        self.assertEqual(priced["cgst_amount"], 108)
        self.assertEqual(priced["tax"], 216)
        self.assertEqual(priced["final_amount"], 1416)
        # each line is taxed on its share of the discounted base
        self.assertEqual([line["cgst_amount"] for line in priced["lines"]], [72, 36])
        self.assertEqual([line["position"] for line in priced["lines"]], [0, 1])

    def test_interstate_slab(self):
        priced = price_lines(self.lines, 0, TaxRates(igst=12))
        self.assertEqual(priced["igst_amount"], 180)
        self.assertEqual(priced["cgst_amount"], 0)
        self.assertEqual(priced["final_amount"], 1680)

    def test_discount_above_subtotal_is_rejected(self):
        with self.assertRaises(InvalidInputError) as ctx:
            price_lines(self.lines, 1501, TaxRates.split(18))
        self.assertEqual(ctx.exception.status_code, 422)
        self.assertTrue(ctx.exception.errors)


if __name__ == "__main__":
    unittest.main()
