"""Tests for contact field normalization."""

import pytest

from repairer_leads.enrich.cleaning import clean_email, clean_phone, clean_text, clean_website


class TestCleaning:
    """Tests for contact field normalization."""

    def test_clean_text(self):
        assert clean_text("  12  rue\n de la  Paix ") == "12 rue de la Paix"
        assert clean_text(None) == ""
        assert len(clean_text("x" * 500)) == 200

    @pytest.mark.parametrize("raw,expected", [
        ("04 78 00 00 00", "0478000000"),
        ("+33 4 78 00 00 00", "+33478000000"),
        ("04.78.00.00.00", "0478000000"),
        ("12345", None),
        ("", None),
        (None, None),
    ])
    def test_clean_phone(self, raw, expected):
        assert clean_phone(raw) == expected

    def test_clean_email(self):
        assert clean_email(" Contact@Shop.FR ") == "contact@shop.fr"
        assert clean_email("not-an-email") is None
        assert clean_email(None) is None

    def test_clean_website(self):
        assert clean_website("https://shop.fr/contact") == "https://shop.fr/contact"
        assert clean_website("shop.fr") == "https://shop.fr"
        assert clean_website("site web") is None
        assert clean_website("ftp://shop.fr") is None
        assert clean_website(None) is None
