import unittest
from decimal import Decimal

from payment_parser.generic import detect_symbol, parse_generic
from payment_parser.parsers import bolivia, peru
from payment_parser.parsers.registry import get_parser
from payment_parser.types import UNKNOWN_SENDER


class PeruParserTest(unittest.TestCase):
    def test_yape_received_from(self) -> None:
        result = peru.parse("Recibiste S/ 50.00 de Juan Perez via Yape")
        self.assertIsNotNone(result)
        self.assertEqual(result.amount, Decimal("50.00"))
        self.assertEqual(result.sender, "Juan Perez")
        self.assertEqual(result.source, "yape")
        self.assertEqual(result.currency, "PEN")

    def test_yape_confirmation_puts_name_first(self) -> None:
        result = peru.parse("Confirmación de Pago Yape! JUAN PÉREZ GARCÍA te envió un pago por S/ 50.00")
        self.assertEqual(result.sender, "JUAN PÉREZ GARCÍA")
        self.assertEqual(result.amount, Decimal("50.00"))
        self.assertEqual(result.source, "yape")

    def test_yape_yapeado_phrasings(self) -> None:
        cases = {
            "CARLOS RUIZ te ha yapeado S/ 100": ("CARLOS RUIZ", Decimal("100")),
            "SANDRA TORRES te yapeó S/ 75.00": ("SANDRA TORRES", Decimal("75.00")),
        }
        for text, (sender, amount) in cases.items():
            with self.subTest(text=text):
                result = peru.parse(text)
                self.assertEqual(result.source, "yape")
                self.assertEqual(result.sender, sender)
                self.assertEqual(result.amount, amount)

    def test_plin(self) -> None:
        result = peru.parse("JOSÉ MARTÍNEZ te ha plineado S/ 60.00")
        self.assertEqual(result.source, "plin")
        self.assertEqual(result.sender, "JOSÉ MARTÍNEZ")
        self.assertEqual(result.amount, Decimal("60.00"))

    def test_plin_strips_interbank(self) -> None:
        result = peru.parse_plin("Interbank: ANA SILVA te plineó S/ 30.50")
        self.assertEqual(result.sender, "ANA SILVA")
        self.assertEqual(result.amount, Decimal("30.50"))

    def test_plin_amount_first(self) -> None:
        result = peru.parse("Recibiste S/ 30.50 de Maria Lopez con Plin")
        self.assertEqual(result.source, "plin")
        self.assertEqual(result.sender, "Maria Lopez")

    def test_bcp_deposit(self) -> None:
        result = peru.parse("BCP: Abono de S/ 100.00 de cuenta ****1234")
        self.assertEqual(result.source, "bcp")
        self.assertEqual(result.amount, Decimal("100.00"))
        self.assertEqual(result.sender, "cuenta ****1234")

    def test_bcp_without_sender(self) -> None:
        result = peru.parse_bcp("Deposito recibido en tu cuenta BCP S/ 15.00")
        self.assertEqual(result.sender, "BCP")

    def test_thousands_separator(self) -> None:
        result = peru.parse("Recibiste S/ 1,250.00 de Rosa Diaz via Yape")
        self.assertEqual(result.amount, Decimal("1250.00"))

    def test_local_fallback(self) -> None:
        result = peru.parse("MARÍA LÓPEZ te envió S/ 25.50")
        self.assertEqual(result.source, "other")
        self.assertEqual(result.sender, "MARÍA LÓPEZ")
        self.assertEqual(result.amount, Decimal("25.50"))
        self.assertEqual(result.currency, "PEN")

    def test_fallback_default_sender(self) -> None:
        result = peru.parse("Abono S/ 12.00 en tu cuenta")
        self.assertEqual(result.sender, UNKNOWN_SENDER)

    def test_no_soles(self) -> None:
        self.assertIsNone(peru.parse("Te enviaron 20 soles"))


class BoliviaParserTest(unittest.TestCase):
    def test_yape_qr(self) -> None:
        result = bolivia.parse("Recibiste un yapeo\nQR DE CHOQUE ORTIZ JUAN te envió Bs. 0.30")
        self.assertEqual(result.source, "yape")
        self.assertEqual(result.sender, "CHOQUE ORTIZ JUAN")
        self.assertEqual(result.amount, Decimal("0.30"))
        self.assertEqual(result.currency, "BOB")

    def test_yape_amount_first(self) -> None:
        result = bolivia.parse("Recibiste Bs. 20 de ANA ROCHA via Yape")
        self.assertEqual(result.sender, "ANA ROCHA")
        self.assertEqual(result.amount, Decimal("20"))

    def test_tigo_money(self) -> None:
        result = bolivia.parse("Tigo Money: Recibiste Bs. 50.00 de PEDRO QUISPE")
        self.assertEqual(result.source, "tigo_money")
        self.assertEqual(result.sender, "PEDRO QUISPE")
        self.assertEqual(result.amount, Decimal("50.00"))

    def test_tigo_money_default_sender(self) -> None:
        result = bolivia.parse_tigo_money("Tigo Money abono Bs. 8")
        self.assertEqual(result.sender, "Tigo Money")

    def test_local_fallback(self) -> None:
        result = bolivia.parse("JUAN MAMANI te envió Bs. 15.50")
        self.assertEqual(result.source, "other")
        self.assertEqual(result.sender, "JUAN MAMANI")
        self.assertEqual(result.amount, Decimal("15.50"))


class GenericParserTest(unittest.TestCase):
    def test_symbol_hint(self) -> None:
        result = parse_generic("Juan te envió $ 250", "$")
        self.assertEqual(result.amount, Decimal("250"))
        self.assertEqual(result.sender, "Juan")
        self.assertEqual(result.source, "other")
        self.assertIsNone(result.currency)

    def test_detects_symbol(self) -> None:
        self.assertEqual(detect_symbol("You received R$ 35.90"), "r$")
        result = parse_generic("You received R$ 35.90 from Maria Silva")
        self.assertEqual(result.amount, Decimal("35.90"))
        self.assertEqual(result.sender, "Maria Silva")

    def test_escapes_symbol(self) -> None:
        result = parse_generic("Recibiste ₡ 5000 de Luis Mora", "₡")
        self.assertEqual(result.amount, Decimal("5000"))
        self.assertEqual(result.sender, "Luis Mora")

    def test_unknown_sender(self) -> None:
        result = parse_generic("Abono recibido € 12.50", "€")
        self.assertEqual(result.sender, UNKNOWN_SENDER)

    def test_no_amount(self) -> None:
        self.assertIsNone(parse_generic("Pago recibido"))
        self.assertIsNone(parse_generic("Pago recibido de $", "$"))


class RegistryTest(unittest.TestCase):
    def test_dedicated_parsers(self) -> None:
        self.assertIs(get_parser("pe"), peru.parse)
        self.assertIs(get_parser("BO"), bolivia.parse)
        self.assertIsNone(get_parser("MX"))
        self.assertIsNone(get_parser(None))


if __name__ == "__main__":
    unittest.main()
