# tests/test_table.py

"""Tests for the table helpers: search, sort, pagination and CSV export."""

import unittest

from app.services.table import (
    build_page,
    filter_products,
    paginate,
    sort_products,
    to_csv,
)
from fakes import make_product


def _catalog() -> list[dict]:
    return [
        make_product(1, "Classic Red Shirt", 30),
        make_product(2, "blue jeans", 5.5),
        make_product(3, "Another Red Hat", 120),
        make_product(4, "Shoes", 30),
    ]


class TestFilterProducts(unittest.TestCase):

    def test_case_insensitive_substring(self) -> None:
        ids = [p["id"] for p in filter_products(_catalog(), "  RED ")]
        self.assertEqual(ids, [1, 3])

    def test_empty_query_keeps_all(self) -> None:
        self.assertEqual(len(filter_products(_catalog(), "")), 4)
        self.assertEqual(len(filter_products(_catalog(), None)), 4)

    def test_missing_title_never_matches(self) -> None:
        products = [{"id": 9}]
        self.assertEqual(filter_products(products, "x"), [])


class TestSortProducts(unittest.TestCase):

    def test_title_ascending_ignores_case(self) -> None:
        titles = [p["title"] for p in sort_products(_catalog(), "title", "asc")]
        self.assertEqual(titles, ["Another Red Hat", "blue jeans", "Classic Red Shirt", "Shoes"])

    def test_price_descending(self) -> None:
        prices = [p["price"] for p in sort_products(_catalog(), "price", "desc")]
        self.assertEqual(prices, [120, 30, 30, 5.5])

    def test_price_sort_is_stable(self) -> None:
        """Equal prices keep their original relative order."""
        ids = [p["id"] for p in sort_products(_catalog(), "price", "asc")]
        self.assertEqual(ids, [2, 1, 4, 3])

    def test_invalid_price_counts_as_zero(self) -> None:
        products = [make_product(1, "A", 10), {"id": 2, "title": "B", "price": "n/a"}]
        ids = [p["id"] for p in sort_products(products, "price", "asc")]
        self.assertEqual(ids, [2, 1])

    def test_accented_titles_sort_with_their_base_letter(self) -> None:
        products = [make_product(1, "zebra", 1), make_product(2, "Écharpe", 1), make_product(3, "echo", 1)]
        titles = [p["title"] for p in sort_products(products, "title", "asc")]
        self.assertEqual(titles, ["Écharpe", "echo", "zebra"])

    def test_unknown_field_keeps_order(self) -> None:
        ids = [p["id"] for p in sort_products(_catalog(), "category", "desc")]
        self.assertEqual(ids, [1, 2, 3, 4])


class TestPaginate(unittest.TestCase):

    def test_slices_requested_page(self) -> None:
        page = paginate(_catalog(), page=2, page_size=3)
        self.assertEqual(page.count, 4)
        self.assertEqual(page.pages, 2)
        self.assertEqual([p["id"] for p in page.results], [4])

    def test_page_is_clamped(self) -> None:
        self.assertEqual(paginate(_catalog(), page=99, page_size=3).page, 2)
        self.assertEqual(paginate(_catalog(), page=0, page_size=3).page, 1)

    def test_empty_list_has_one_page(self) -> None:
        page = paginate([], page=3, page_size=10)
        self.assertEqual((page.page, page.pages, page.results), (1, 1, []))


class TestBuildPage(unittest.TestCase):

    def test_search_then_sort_then_paginate(self) -> None:
        page = build_page(_catalog(), query="red", sort="price", direction="desc", page=1, page_size=1)
        self.assertEqual(page.count, 2)
        self.assertEqual(page.pages, 2)
        self.assertEqual(page.results[0]["id"], 3)

    def test_non_list_upstream_body_renders_empty(self) -> None:
        page = build_page({"unexpected": True})
        self.assertEqual(page.count, 0)


class TestToCsv(unittest.TestCase):

    def test_header_and_row(self) -> None:
        csv_text = to_csv([make_product(7, "Hat", 9.99, category="Misc")])
        lines = csv_text.split("\n")
        self.assertEqual(lines[0], "id,title,price,category,image")
        self.assertEqual(lines[1], "7,Hat,9.99,Misc,https://img.test/7.png")

    def test_special_characters_are_quoted(self) -> None:
        product = make_product(1, 'Say "hi", please', 1)
        csv_text = to_csv([product])
        self.assertIn('"Say ""hi"", please"', csv_text)

    def test_missing_category_and_images(self) -> None:
        csv_text = to_csv([{"id": 2, "title": "Bare", "price": 3, "images": [{"url": "x"}]}])
        self.assertEqual(csv_text.split("\n")[1], "2,Bare,3,,")

    def test_carriage_return_and_newline_are_quoted(self) -> None:
        """CR or LF inside a value must not split the row."""
        csv_text = to_csv([
            {"id": 1, "title": "a\rb", "price": 1},
            {"id": 2, "title": "c\nd", "price": 2},
        ])
        self.assertEqual(
            csv_text,
            'id,title,price,category,image\n1,"a\rb",1,,\n2,"c\nd",2,,\n',
        )
