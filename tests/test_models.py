import unittest
from decimal import Decimal

from fx_crossrate.core.models import (
    ConversionPath,
    CurrencyPair,
    DirectRate,
    normalise_currency_code,
    to_decimal,
)
from fx_crossrate.exceptions import CurrencyValidationError


class CurrencyCodeTests(unittest.TestCase):
    def test_codes_are_upper_cased(self) -> None:
        self.assertEqual(normalise_currency_code("usd"), "USD")
        self.assertEqual(CurrencyPair("cad", "Gbp"), CurrencyPair("CAD", "GBP"))

    def test_invalid_codes_are_rejected(self) -> None:
        for code in (None, "", "US", "USDT", 840):
            with self.subTest(code=code):
                with self.assertRaises(CurrencyValidationError):
                    normalise_currency_code(code)  # type: ignore[arg-type]

    def test_validation_error_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            CurrencyPair("USD", "EURO")


class CurrencyPairTests(unittest.TestCase):
    def test_structural_equality_and_hashing(self) -> None:
        rates = {CurrencyPair("usd", "cad"): 1}
        self.assertIn(CurrencyPair("USD", "CAD"), rates)
        self.assertNotEqual(CurrencyPair("USD", "CAD"), CurrencyPair("CAD", "USD"))

    def test_identity_pairs_are_valid_values(self) -> None:
        pair = CurrencyPair("USD", "USD")
        self.assertTrue(pair.is_identity)
        self.assertEqual(str(pair), "USD=>USD")


class ConversionPathTests(unittest.TestCase):
    def setUp(self) -> None:
        self.path = ConversionPath(
            (CurrencyPair("USD", "CAD"), CurrencyPair("CAD", "GBP"), CurrencyPair("GBP", "EUR"))
        )

    def test_endpoints_and_rendering(self) -> None:
        self.assertEqual(self.path.base, "USD")
        self.assertEqual(self.path.quote, "EUR")
        self.assertEqual(self.path.pair, CurrencyPair("USD", "EUR"))
        self.assertEqual(str(self.path), "USD=>CAD=>GBP=>EUR")
        self.assertEqual(str(ConversionPath()), "")

    def test_paths_compare_by_hop_sequence(self) -> None:
        same = ConversionPath(tuple(self.path))
        self.assertEqual(self.path, same)
        self.assertEqual(hash(self.path), hash(same))
        self.assertNotEqual(self.path, ConversionPath(self.path[:2]))

    def test_prepend_builds_a_longer_path(self) -> None:
        tail = ConversionPath.single(CurrencyPair("CAD", "GBP"))
        path = tail.prepend(CurrencyPair("USD", "CAD"))
        self.assertEqual(len(path), 2)
        self.assertTrue(path.resolves(CurrencyPair("USD", "GBP")))
        self.assertFalse(path.resolves(CurrencyPair("USD", "CAD")))

    def test_hops_must_chain(self) -> None:
        with self.assertRaises(ValueError):
            ConversionPath((CurrencyPair("USD", "CAD"), CurrencyPair("GBP", "EUR")))

    def test_hops_must_not_repeat(self) -> None:
        loop = (CurrencyPair("USD", "CAD"), CurrencyPair("CAD", "USD"))
        with self.assertRaises(ValueError):
            ConversionPath(loop + loop)

    def test_empty_path_has_no_endpoints(self) -> None:
        with self.assertRaises(ValueError):
            ConversionPath().base


class DirectRateTests(unittest.TestCase):
    def test_coerce_accepts_tuples(self) -> None:
        rate = DirectRate.coerce(("usd", "cad", 1.34))
        self.assertEqual(rate.pair, CurrencyPair("USD", "CAD"))
        self.assertEqual(rate.rate, Decimal("1.34"))
        self.assertIs(DirectRate.coerce(rate), rate)

    def test_rates_must_be_positive_numbers(self) -> None:
        for value in (0, -1, "abc", None, True, float("nan"), float("inf")):
            with self.subTest(value=value):
                with self.assertRaises(CurrencyValidationError):
                    DirectRate.of("USD", "CAD", value)  # type: ignore[arg-type]

    def test_malformed_tuples_are_rejected(self) -> None:
        with self.assertRaises(CurrencyValidationError):
            DirectRate.coerce(("USD", "CAD"))  # type: ignore[arg-type]

    def test_to_decimal_keeps_float_digits(self) -> None:
        self.assertEqual(to_decimal(0.58), Decimal("0.58"))
        self.assertEqual(to_decimal(" 141.39 "), Decimal("141.39"))
        self.assertEqual(to_decimal(7), Decimal(7))


if __name__ == "__main__":
    unittest.main()
