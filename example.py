from decimal import Decimal

from fx_crossrate import CurrencyConverter, RateNotFoundError

print(CurrencyConverter.__version__)  # 0.1.0

converter = CurrencyConverter(
    [
        ("CAD", "GBP", Decimal("0.58")),
        ("EUR", "JPY", Decimal("141.39")),
        ("GBP", "EUR", Decimal("1.18")),
        ("USD", "CAD", Decimal("1.34")),
    ]
)

# Direct rate
print(converter.convert("USD", "CAD", 1000))  # 1340.00

# Derived rates
print(converter.convert("USD", "GBP", 1000))  # 777.2000
print(converter.convert("CAD", "EUR", 1000))  # 684.4000
print(converter.route("USD", "JPY"))

# No reverse rates were configured
try:
    converter.convert("EUR", "USD", 1)
except RateNotFoundError as exc:
    print(exc)

# Persist the configuration and rebuild a converter from it
# from fx_crossrate import RateConfigurationStore
# with RateConfigurationStore("rates.db") as store:
#     converter.save_configuration(store)
#     restored = CurrencyConverter.from_store(store)
