"""Forms for the two factor verification flow."""
from __future__ import annotations

from django import forms

from .utils import CODE_LENGTH


class TwoFactorForm(forms.Form):
    """Collect the code that was mailed to the user."""

    two_factor_code = forms.CharField(
        label="Two factor code",
        strip=True,
        error_messages={"required": "The two factor code field is required."},
        widget=forms.TextInput(
            attrs={
                "class": "form-control",
                "inputmode": "numeric",
                "autocomplete": "one-time-code",
            }
        ),
    )

    def clean_two_factor_code(self) -> str:
        # Codes pasted with spaces ("123 456") are accepted.
        code = "".join(self.cleaned_data["two_factor_code"].split())
        if not (code.isascii() and code.isdigit()):
            raise forms.ValidationError("The two factor code field must be a number.")
        if len(code) != CODE_LENGTH:
            raise forms.ValidationError(
                f"The two factor code field must be {CODE_LENGTH} digits."
            )
        return code


class TwoFactorSettingsForm(forms.Form):
    two_factor_enabled = forms.BooleanField(required=False)
