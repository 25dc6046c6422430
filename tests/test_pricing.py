import unittest

from support import make_ingredients, make_pizza

from fornaccio.domain.errors import InvalidOrderError
from fornaccio.domain.pricing import PricedLine, order_total, price_line


class PriceLineTests(unittest.TestCase):
    def setUp(self):
        self.pizza = make_pizza()
        self.ingredients = make_ingredients()

    def test_plain_pizza_costs_its_base_price(self):
        line = price_line(self.pizza, self.ingredients)
        self.assertEqual(line.unit_price, 10.0)
        self.assertEqual(line.line_total, 10.0)
        self.assertEqual(line.pizza_name, "Margherita")

    def test_extras_are_added_and_multiplied_by_quantity(self):
        line = price_line(self.pizza, self.ingredients, added=["parma-ham"], quantity=2)
        self.assertEqual(line.unit_price, 13.0)
        self.assertEqual(line.line_total, 26.0)

    def test_removing_a_default_is_free(self):
        line = price_line(self.pizza, self.ingredients, removed=["basil"])
        self.assertEqual(line.unit_price, 10.0)
        self.assertEqual(line.removed, ["basil"])

    def test_duplicates_are_collapsed(self):
        line = price_line(self.pizza, self.ingredients, added=["parma-ham", "parma-ham"])
        self.assertEqual(line.added, ["parma-ham"])
        self.assertEqual(line.unit_price, 13.0)

    def test_rejections(self):
        cases = [
            dict(added=["basil"]),                         # already on the pizza
            dict(added=["pineapple"]),                     # unknown
            dict(added=["truffle"]),                       # unavailable
            dict(removed=["parma-ham"]),                   # not a default
            dict(added=["parma-ham"], removed=["parma-ham"]),
            dict(quantity=0),
            dict(quantity=51),
        ]
        for kwargs in cases:
            with self.subTest(**{k: str(v) for k, v in kwargs.items()}):
                with self.assertRaises(InvalidOrderError):
                    price_line(self.pizza, self.ingredients, **kwargs)

    def test_missing_or_unavailable_pizza(self):
        with self.assertRaises(InvalidOrderError):
            price_line(None, self.ingredients)
        with self.assertRaises(InvalidOrderError):
            price_line(make_pizza(is_available=False), self.ingredients)

    def test_counter_may_price_an_unavailable_pizza(self):
        line = price_line(make_pizza(is_available=False), self.ingredients, include_unavailable=True)
        self.assertEqual(line.unit_price, 10.0)
        with self.assertRaises(InvalidOrderError):
            price_line(None, self.ingredients, include_unavailable=True)


class OrderTotalTests(unittest.TestCase):
    def test_total_is_rounded_to_cents(self):
        lines = [
            PricedLine("a", "A", 10.1, 10.1, 3),
            PricedLine("b", "B", 0.1, 0.2, 1),
        ]
        self.assertEqual(order_total(lines), 30.5)

    def test_empty_order(self):
        self.assertEqual(order_total([]), 0)


if __name__ == "__main__":
    unittest.main()
