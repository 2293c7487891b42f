from django.test import SimpleTestCase

from projecthub.accounts.forms import TwoFactorForm


class TwoFactorFormTests(SimpleTestCase):
    def test_code_with_spaces_is_accepted(self):
        form = TwoFactorForm(data={"two_factor_code": " 123 456 "})

        self.assertTrue(form.is_valid())
        self.assertEqual(form.cleaned_data["two_factor_code"], "123456")

    def test_non_ascii_digits_are_rejected(self):
        for value in ("①②③④⑤⑥", "١٢٣٤٥٦", "１２３４５６"):
            with self.subTest(value=value):
                form = TwoFactorForm(data={"two_factor_code": value})

                self.assertFalse(form.is_valid())
                self.assertEqual(
                    form.errors["two_factor_code"],
                    ["The two factor code field must be a number."],
                )

    def test_input_is_not_truncated_by_the_browser(self):
        rendered = str(TwoFactorForm()["two_factor_code"])

        self.assertNotIn("maxlength", rendered)
